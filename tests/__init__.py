"""Tests for the draftopt package."""

from __future__ import annotations

import sys
from pathlib import Path


# Allow ``pytest`` from a plain checkout; an editable install makes this a no-op.
_SRC = Path(__file__).resolve().parents[1] / "src"
if _SRC.is_dir() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))
