"""Snake-draft roster optimization as a binary integer program."""

__version__ = "0.1.0"
