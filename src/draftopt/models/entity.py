"""Canonical entity models shared across ingestion and optimizer layers."""

from __future__ import annotations

import math
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict


class EntityRecord(BaseModel):
    """A draftable player with per-metric values and draft-value proxies."""

    entity_id: str = Field(..., min_length=1)
    name: str = ""
    group: str = Field(..., min_length=1)
    values: Dict[str, float] = Field(default_factory=dict)
    draft_values: Dict[str, float] = Field(default_factory=dict)
    eligibility: FrozenSet[str] = Field(default_factory=frozenset)
    conflict_bucket: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        group = str(data.get("group") or "").strip().upper()
        data["group"] = group
        if not data.get("name"):
            data["name"] = data.get("entity_id", "")
        eligibility = {str(label).strip().lower() for label in data.get("eligibility") or ()}
        if group:
            eligibility.add(group.lower())
        data["eligibility"] = frozenset(eligibility)
        bucket = data.get("conflict_bucket")
        if bucket is not None:
            bucket = str(bucket).strip()
            data["conflict_bucket"] = bucket or None
        return data

    @field_validator("values")
    @classmethod
    def _check_values(cls, values: Dict[str, float]) -> Dict[str, float]:
        for metric, value in values.items():
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"value for metric {metric!r} must be finite and >= 0, got {value}")
        return values

    @field_validator("draft_values")
    @classmethod
    def _check_draft_values(cls, draft_values: Dict[str, float]) -> Dict[str, float]:
        for proxy, value in draft_values.items():
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"draft value for proxy {proxy!r} must be finite and > 0, got {value}")
        return draft_values

    def value(self, metric: str) -> float:
        return self.values[metric]

    def draft_value(self, proxy: str) -> float:
        return self.draft_values[proxy]

    def is_eligible(self, category: str) -> bool:
        return category.lower() in self.eligibility
