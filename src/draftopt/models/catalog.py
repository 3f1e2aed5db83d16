"""Read-only collection of entities shared across solves."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from draftopt.exceptions import ConfigurationError
from draftopt.models.entity import EntityRecord


class EntityCatalog:
    """Ordered, immutable catalog of draftable entities.

    The catalog is built once and passed by reference into every model build;
    nothing downstream mutates it.
    """

    __slots__ = ("_entities", "_by_id")

    def __init__(self, entities: Iterable[EntityRecord]):
        ordered = tuple(entities)
        by_id: Dict[str, EntityRecord] = {}
        duplicates: List[str] = []
        for entity in ordered:
            if entity.entity_id in by_id:
                duplicates.append(entity.entity_id)
                continue
            by_id[entity.entity_id] = entity
        if duplicates:
            preview = ", ".join(sorted(set(duplicates))[:5])
            raise ConfigurationError(f"Duplicate entity ids in catalog: {preview}")
        self._entities: Tuple[EntityRecord, ...] = ordered
        self._by_id = by_id

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[EntityRecord]:
        return iter(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def __getitem__(self, entity_id: str) -> EntityRecord:
        return self._by_id[entity_id]

    def __repr__(self) -> str:
        return f"EntityCatalog({len(self._entities)} entities)"

    def __getstate__(self):
        return self._entities

    def __setstate__(self, state) -> None:
        self._entities = tuple(state)
        self._by_id = {entity.entity_id: entity for entity in self._entities}

    @property
    def entities(self) -> Tuple[EntityRecord, ...]:
        return self._entities

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(entity.entity_id for entity in self._entities)

    def get(self, entity_id: str) -> Optional[EntityRecord]:
        return self._by_id.get(entity_id)

    def eligible_for(self, category: str) -> List[EntityRecord]:
        return [entity for entity in self._entities if entity.is_eligible(category)]

    def in_group(self, group: str) -> List[EntityRecord]:
        key = group.upper()
        return [entity for entity in self._entities if entity.group == key]

    def conflict_buckets(self) -> List[str]:
        """Distinct conflict buckets present in the catalog, numerically sorted where possible."""

        buckets = {entity.conflict_bucket for entity in self._entities if entity.conflict_bucket}
        return sorted(buckets, key=lambda b: (0, int(b), b) if b.isdigit() else (1, 0, b))

    def metrics(self) -> List[str]:
        """Metric names every entity carries a value for."""

        return _common_keys(entity.values for entity in self._entities)

    def proxies(self) -> List[str]:
        """Draft-value proxy names every entity carries a value for."""

        return _common_keys(entity.draft_values for entity in self._entities)

    def missing(self, *, metric: Optional[str] = None, proxy: Optional[str] = None) -> List[str]:
        """Ids of entities lacking ``metric`` or ``proxy``."""

        missing: List[str] = []
        for entity in self._entities:
            if metric is not None and metric not in entity.values:
                missing.append(entity.entity_id)
            elif proxy is not None and proxy not in entity.draft_values:
                missing.append(entity.entity_id)
        return missing


def _common_keys(mappings: Iterable[Dict[str, float]]) -> List[str]:
    common: Optional[List[str]] = None
    for mapping in mappings:
        if common is None:
            common = list(mapping)
        else:
            common = [key for key in common if key in mapping]
    return common or []
