"""Post-solve analysis (attainment, roster tables)."""

from .attainment import attainment_ratio, excess_value, group_counts, roster_total
from .export import RosterExportError, RosterRow, roster_rows, roster_to_csv, write_roster_csv

__all__ = [
    "attainment_ratio",
    "excess_value",
    "group_counts",
    "roster_total",
    "RosterExportError",
    "RosterRow",
    "roster_rows",
    "roster_to_csv",
    "write_roster_csv",
]
