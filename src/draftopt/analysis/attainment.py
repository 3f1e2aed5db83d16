"""Compare drafted rosters against a reference roster."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, Sequence, Union

from draftopt.exceptions import ConfigurationError, ZeroReferenceError
from draftopt.models import EntityCatalog
from draftopt.optimizer.decoder import Assignment


logger = logging.getLogger(__name__)

RosterLike = Union[Assignment, Sequence[str]]


def _ids(roster: RosterLike) -> Iterable[str]:
    if isinstance(roster, Assignment):
        return roster.entity_ids
    return roster


def roster_total(roster: RosterLike, catalog: EntityCatalog, metric: str) -> float:
    """Sum of ``metric`` over every entity in ``roster``."""

    total = 0.0
    for entity_id in _ids(roster):
        entity = catalog.get(entity_id)
        if entity is None:
            raise ConfigurationError(f"Entity {entity_id!r} is not in the catalog")
        if metric not in entity.values:
            raise ConfigurationError(f"Metric {metric!r} missing for entity {entity_id!r}")
        total += entity.values[metric]
    return total


def attainment_ratio(
    roster: RosterLike,
    reference: RosterLike,
    catalog: EntityCatalog,
    metric: str,
) -> float:
    """Share of the reference roster's ``metric`` total achieved by ``roster``.

    The reference is usually the optimal draft solved against realized points,
    so a projected draft scores at most 1.0 when evaluated on the same metric.
    """

    reference_total = roster_total(reference, catalog, metric)
    if reference_total == 0:
        raise ZeroReferenceError(f"Reference roster totals zero under {metric!r}")
    ratio = roster_total(roster, catalog, metric) / reference_total
    logger.info("Total point attainment under %s: %.1f%%", metric, ratio * 100)
    return ratio


def excess_value(total: float, base_total: float) -> float:
    """Relative change of ``total`` over ``base_total``."""

    if base_total == 0:
        raise ZeroReferenceError("Base total is zero")
    return total / base_total - 1


def group_counts(roster: RosterLike, catalog: EntityCatalog) -> Dict[str, int]:
    counts: Counter = Counter()
    for entity_id in _ids(roster):
        entity = catalog.get(entity_id)
        if entity is None:
            raise ConfigurationError(f"Entity {entity_id!r} is not in the catalog")
        counts[entity.group] += 1
    return dict(counts)
