"""Roster table helpers for solved drafts."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from draftopt.models import EntityCatalog
from draftopt.optimizer.scenarios import DraftResult


ROSTER_HEADERS = ("round", "entity_id", "name", "group", "metric", "value")


class RosterExportError(RuntimeError):
    """Raised when a drafted entity cannot be resolved against the catalog."""


@dataclass(frozen=True)
class RosterRow:
    round: int
    entity_id: str
    name: str
    group: str
    metric: str
    value: float

    def as_list(self) -> list:
        return [self.round, self.entity_id, self.name, self.group, self.metric, self.value]


def roster_rows(
    result: DraftResult,
    catalog: EntityCatalog,
    *,
    metric: Optional[str] = None,
) -> List[RosterRow]:
    """One row per round, sorted by round, valued under ``metric`` (default: the solved metric)."""

    metric = metric or result.config.active_metric
    rows: List[RosterRow] = []
    for pick in sorted(result.assignment, key=lambda p: p.round):
        entity = catalog.get(pick.entity_id)
        if entity is None:
            raise RosterExportError(f"Round {pick.round} entity {pick.entity_id!r} not in catalog")
        if metric not in entity.values:
            raise RosterExportError(f"Metric {metric!r} missing for entity {pick.entity_id!r}")
        rows.append(
            RosterRow(
                round=pick.round,
                entity_id=entity.entity_id,
                name=entity.name,
                group=entity.group,
                metric=metric,
                value=entity.values[metric],
            )
        )
    return rows


def roster_to_csv(rows: Sequence[RosterRow]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(ROSTER_HEADERS)
    for row in rows:
        writer.writerow(row.as_list())
    return buffer.getvalue()


def write_roster_csv(path: Path, rows_by_scenario: Mapping[str, Sequence[RosterRow]]) -> int:
    """Write every scenario's roster to ``path`` with a leading scenario column.

    Returns the number of data rows written.
    """

    written = 0
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(("scenario", *ROSTER_HEADERS))
        for scenario, rows in rows_by_scenario.items():
            for row in rows:
                writer.writerow([scenario, *row.as_list()])
                written += 1
    return written


__all__ = [
    "ROSTER_HEADERS",
    "RosterExportError",
    "RosterRow",
    "roster_rows",
    "roster_to_csv",
    "write_roster_csv",
]
