"""Input adapters that normalize raw catalog data."""

from .catalog import (
    DEFAULT_CATALOG_MAPPING,
    CatalogRow,
    load_catalog_csv,
    load_catalog_rows,
    rows_to_entities,
)

__all__ = [
    "DEFAULT_CATALOG_MAPPING",
    "CatalogRow",
    "load_catalog_csv",
    "load_catalog_rows",
    "rows_to_entities",
]
