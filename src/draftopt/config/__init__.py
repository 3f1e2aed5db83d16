"""Configuration helpers for draft formats and catalog columns."""

from .draft import (
    BYE_WEEKS,
    DEFAULT_CATEGORY_REQUIREMENTS,
    FLEX_CATEGORY,
    FLEX_GROUPS,
    GROUND_TRUTH_METRIC,
    METRIC_COLUMNS,
    PROXY_COLUMNS,
    DraftConfig,
    get_format,
    iter_formats,
)

__all__ = [
    "BYE_WEEKS",
    "DEFAULT_CATEGORY_REQUIREMENTS",
    "FLEX_CATEGORY",
    "FLEX_GROUPS",
    "GROUND_TRUTH_METRIC",
    "METRIC_COLUMNS",
    "PROXY_COLUMNS",
    "DraftConfig",
    "get_format",
    "iter_formats",
]
