"""Persist and load CLI catalog profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class CatalogProfile:
    column_mapping: Dict[str, str] = field(default_factory=dict)
    metric_columns: Optional[List[str]] = None
    proxy_columns: Optional[List[str]] = None

    @classmethod
    def load(cls, path: Path) -> "CatalogProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            column_mapping=data.get("column_mapping", {}),
            metric_columns=data.get("metric_columns"),
            proxy_columns=data.get("proxy_columns"),
        )

    def save(self, path: Path) -> None:
        payload = {
            "column_mapping": self.column_mapping,
            "metric_columns": self.metric_columns,
            "proxy_columns": self.proxy_columns,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
