"""Draft configuration for supported league formats."""

from __future__ import annotations

from dataclasses import dataclass, field
from dataclasses import replace as _replace
from typing import Dict, Iterable, Mapping, Optional, Tuple

from draftopt.exceptions import ConfigurationError


METRIC_COLUMNS: Tuple[str, ...] = (
    "athletic_ppr_projected_points",
    "athletic_half_projected_points",
    "athletic_std_projected_points",
    "pff_ppr_projected_points",
    "numberfire_ppr_projected_points",
    "rotoballer_ppr_projected_points",
    "week11_actual_ppr_points",
    "week13_actual_ppr_points",
)

GROUND_TRUTH_METRIC = "week13_actual_ppr_points"

PROXY_COLUMNS: Tuple[str, ...] = ("adp", "min_draft_position", "max_draft_position")

BYE_WEEKS: Tuple[str, ...] = ("5", "6", "7", "8", "9", "10", "11", "12", "14")

# Groups whose players may also fill a flex slot.
FLEX_GROUPS = frozenset({"RB", "WR", "TE"})

FLEX_CATEGORY = "flex"

DEFAULT_CATEGORY_REQUIREMENTS: Dict[str, int] = {
    "qb": 1,
    "rb": 2,
    "wr": 2,
    "te": 1,
    "flex": 2,
}


def _default_requirements() -> Dict[str, int]:
    return dict(DEFAULT_CATEGORY_REQUIREMENTS)


def _default_group_caps() -> Dict[str, int]:
    return {"QB": 2}


@dataclass(frozen=True)
class DraftConfig:
    round_count: int = 14
    team_count: int = 12
    start_slot: int = 6
    category_requirements: Mapping[str, int] = field(default_factory=_default_requirements)
    max_per_group: Mapping[str, int] = field(default_factory=_default_group_caps)
    max_per_conflict_bucket: Optional[int] = 3
    active_metric: str = "athletic_ppr_projected_points"
    active_proxy: str = "adp"

    def replace(self, **changes) -> "DraftConfig":
        """Return a copy with ``changes`` applied; mappings are copied, never shared."""

        for key in ("category_requirements", "max_per_group"):
            if key in changes and changes[key] is not None:
                changes[key] = dict(changes[key])
        return _replace(self, **changes)

    def without_category(self, category: str) -> "DraftConfig":
        requirements = {
            label: minimum
            for label, minimum in self.category_requirements.items()
            if label != category.lower()
        }
        return self.replace(category_requirements=requirements)

    def without_group_caps(self) -> "DraftConfig":
        return self.replace(max_per_group={})

    def validate(self) -> None:
        """Check scalar parameters, raising ConfigurationError on the first problem."""

        if self.round_count <= 0:
            raise ConfigurationError(f"round_count must be positive, got {self.round_count}")
        if self.team_count <= 0:
            raise ConfigurationError(f"team_count must be positive, got {self.team_count}")
        if not 1 <= self.start_slot <= self.team_count:
            raise ConfigurationError(
                f"start_slot must be within [1, {self.team_count}], got {self.start_slot}"
            )
        for label, minimum in self.category_requirements.items():
            if minimum < 0:
                raise ConfigurationError(f"Requirement for {label!r} must be >= 0, got {minimum}")
        for group, cap in self.max_per_group.items():
            if cap < 0:
                raise ConfigurationError(f"Cap for group {group!r} must be >= 0, got {cap}")
        if self.max_per_conflict_bucket is not None and self.max_per_conflict_bucket < 0:
            raise ConfigurationError(
                f"max_per_conflict_bucket must be >= 0, got {self.max_per_conflict_bucket}"
            )


_DRAFT_FORMATS: Dict[str, DraftConfig] = {
    "STANDARD": DraftConfig(),
    "TEN_TEAM": DraftConfig(team_count=10, start_slot=5),
    "NO_TE": DraftConfig().without_category("te"),
}


def iter_formats() -> Iterable[Tuple[str, DraftConfig]]:
    """Return an iterator of (name, config) pairs for every configured format."""

    return _DRAFT_FORMATS.items()


def get_format(name: str) -> DraftConfig:
    """Fetch a named draft format, raising KeyError if missing."""

    key = name.upper().replace("-", "_")
    if key not in _DRAFT_FORMATS:
        raise KeyError(f"No draft format configured for {name!r}")
    return _DRAFT_FORMATS[key]
