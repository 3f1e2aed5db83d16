"""Binary integer program for the snake-draft roster problem."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import pulp
from pulp import LpConstraint, LpVariable, lpSum

from draftopt.config import DraftConfig
from draftopt.exceptions import ConfigurationError
from draftopt.models import EntityCatalog
from draftopt.optimizer.snake import round_bound


logger = logging.getLogger(__name__)

VariableKey = Tuple[str, int]


@dataclass
class DraftModel:
    """A built PuLP problem plus the variable lookup needed to decode it."""

    problem: pulp.LpProblem
    variables: Dict[VariableKey, LpVariable]
    config: DraftConfig
    catalog: EntityCatalog
    constraints: Dict[str, LpConstraint] = field(default_factory=dict)

    def add_constraint(self, constraint: LpConstraint, name: str) -> None:
        self.problem += constraint, name
        self.constraints[name] = constraint

    @property
    def rounds(self) -> range:
        return range(1, self.config.round_count + 1)

    @property
    def constraint_count(self) -> int:
        return len(self.constraints)


def validate_inputs(catalog: EntityCatalog, config: DraftConfig) -> None:
    """Raise ConfigurationError if ``config`` cannot be modelled against ``catalog``."""

    config.validate()
    if len(catalog) == 0:
        raise ConfigurationError("Entity catalog is empty")

    missing_metric = catalog.missing(metric=config.active_metric)
    if missing_metric:
        raise ConfigurationError(
            f"Metric {config.active_metric!r} missing for {len(missing_metric)} entities "
            f"(e.g. {', '.join(missing_metric[:3])})"
        )
    missing_proxy = catalog.missing(proxy=config.active_proxy)
    if missing_proxy:
        raise ConfigurationError(
            f"Draft value {config.active_proxy!r} missing for {len(missing_proxy)} entities "
            f"(e.g. {', '.join(missing_proxy[:3])})"
        )

    for category in config.category_requirements:
        if not catalog.eligible_for(category):
            raise ConfigurationError(f"No entity is eligible for category {category!r}")


def build_model(catalog: EntityCatalog, config: DraftConfig) -> DraftModel:
    """Build a fresh model with one binary per (entity, round) pair."""

    validate_inputs(catalog, config)
    start = time.perf_counter()

    entities = catalog.entities
    rounds = range(1, config.round_count + 1)
    metric = config.active_metric
    proxy = config.active_proxy

    problem = pulp.LpProblem("SnakeDraft", pulp.LpMaximize)

    # Names are index based; PuLP rewrites characters common in player names.
    variables: Dict[VariableKey, LpVariable] = {
        (entity.entity_id, r): LpVariable(f"x_{i}_{r}", cat="Binary")
        for i, entity in enumerate(entities)
        for r in rounds
    }
    x = variables

    problem += (
        lpSum(entity.value(metric) * x[entity.entity_id, r] for entity in entities for r in rounds),
        "TotalValue",
    )
    model = DraftModel(problem=problem, variables=variables, config=config, catalog=catalog)
    add = model.add_constraint

    for r in rounds:
        add(lpSum(x[entity.entity_id, r] for entity in entities) == 1, f"round_fill_{r}")

    for i, entity in enumerate(entities):
        add(lpSum(x[entity.entity_id, r] for r in rounds) <= 1, f"entity_once_{i}")

    for r in rounds:
        bound = round_bound(r, config.start_slot, config.team_count)
        add(
            lpSum(entity.draft_value(proxy) * x[entity.entity_id, r] for entity in entities) >= bound,
            f"draft_position_{r}",
        )

    for idx, (category, minimum) in enumerate(config.category_requirements.items()):
        eligible = catalog.eligible_for(category)
        add(
            lpSum(x[entity.entity_id, r] for entity in eligible for r in rounds) >= minimum,
            f"category_min_{idx}",
        )

    for idx, (group, cap) in enumerate(config.max_per_group.items()):
        members = catalog.in_group(group)
        if not members:
            logger.debug("Group cap for %s skipped; no entities in group", group)
            continue
        add(
            lpSum(x[entity.entity_id, r] for entity in members for r in rounds) <= cap,
            f"group_max_{idx}",
        )

    buckets: List[str] = []
    if config.max_per_conflict_bucket is not None:
        buckets = catalog.conflict_buckets()
        for idx, bucket in enumerate(buckets):
            members = [entity for entity in entities if entity.conflict_bucket == bucket]
            add(
                lpSum(x[entity.entity_id, r] for entity in members for r in rounds)
                <= config.max_per_conflict_bucket,
                f"bucket_max_{idx}",
            )

    logger.info(
        "Built draft model – %s entities x %s rounds = %s variables, %s constraints, %s buckets (%.2fs)",
        len(entities),
        config.round_count,
        len(variables),
        model.constraint_count,
        len(buckets),
        time.perf_counter() - start,
    )
    return model
