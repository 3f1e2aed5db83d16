"""Helpers to load catalog CSVs and emit canonical entity records."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Collection, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from draftopt.config import FLEX_CATEGORY, FLEX_GROUPS, METRIC_COLUMNS, PROXY_COLUMNS
from draftopt.exceptions import CatalogError
from draftopt.models import EntityCatalog, EntityRecord


logger = logging.getLogger(__name__)

DEFAULT_CATALOG_MAPPING = {
    "entity_id": "player_name",
    "name": "player_name",
    "group": "position",
    "bye_week": "bye_week",
    "team": "team",
}

_ELIGIBLE_COLUMN = re.compile(r"^is_(?P<category>[a-z0-9_]+?)_eligible$", re.IGNORECASE)
_BYE_COLUMN = re.compile(r"^is_bye_week(?P<bucket>[a-z0-9_]+)$", re.IGNORECASE)


class CatalogRow(BaseModel):
    line: int = Field(..., ge=1)
    raw_id: str
    raw_name: str = ""
    raw_group: str
    raw_team: Optional[str] = None
    raw_bye_week: Optional[str] = None
    raw_values: Dict[str, Optional[str]] = Field(default_factory=dict)
    raw_draft_values: Dict[str, Optional[str]] = Field(default_factory=dict)
    eligibility_flags: Dict[str, Optional[str]] = Field(default_factory=dict)
    bye_flags: Dict[str, Optional[str]] = Field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Optional[str]],
        mapping: Mapping[str, str],
        *,
        line: int,
        metrics: Sequence[str],
        proxies: Sequence[str],
    ) -> "CatalogRow":
        row = {column.strip(): value for column, value in row.items() if column}

        def extract(key: str) -> Optional[str]:
            column = mapping.get(key)
            if column is None:
                return None
            value = row.get(column)
            return value.strip() if value is not None else None

        eligibility_flags: Dict[str, Optional[str]] = {}
        bye_flags: Dict[str, Optional[str]] = {}
        for column, value in row.items():
            match = _ELIGIBLE_COLUMN.match(column)
            if match:
                eligibility_flags[match.group("category").lower()] = value
                continue
            match = _BYE_COLUMN.match(column)
            if match:
                bye_flags[match.group("bucket")] = value

        return cls(
            line=line,
            raw_id=extract("entity_id") or "",
            raw_name=extract("name") or "",
            raw_group=extract("group") or "",
            raw_team=extract("team"),
            raw_bye_week=extract("bye_week"),
            raw_values={metric: row.get(metric) for metric in metrics},
            raw_draft_values={proxy: row.get(proxy) for proxy in proxies},
            eligibility_flags=eligibility_flags,
            bye_flags=bye_flags,
        )


def _parse_number(raw: Optional[str], *, column: str, line: int) -> float:
    text = (raw or "").strip()
    if not text or text.upper() in {"NA", "N/A", "NAN"}:
        raise CatalogError(f"line {line}: column {column!r} is empty; impute missing values upstream")
    try:
        return float(text)
    except ValueError:
        raise CatalogError(f"line {line}: column {column!r} value {raw!r} is not numeric") from None


def _parse_flag(value: Optional[str], *, column: str, line: int) -> bool:
    text = (value or "").strip().lower()
    if not text:
        return False
    if text in {"1", "1.0", "true", "t", "yes", "y"}:
        return True
    if text in {"0", "0.0", "false", "f", "no", "n"}:
        return False
    raise CatalogError(f"line {line}: column {column!r} value {value!r} is not a boolean flag")


def _normalize_bucket(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    text = raw.strip()
    if not text or text.upper() in {"NA", "N/A", "NAN"}:
        return None
    # Bye weeks often arrive as floats ("7.0") from spreadsheet exports.
    if re.fullmatch(r"\d+\.0+", text):
        text = text.split(".", 1)[0]
    return text


def _eligibility(row: CatalogRow, group: str, flex_groups: Collection[str]) -> set[str]:
    if row.eligibility_flags:
        return {
            category
            for category, value in row.eligibility_flags.items()
            if _parse_flag(value, column=f"is_{category}_eligible", line=row.line)
        }
    categories = {group.lower()}
    if group in flex_groups:
        categories.add(FLEX_CATEGORY)
    return categories


def _conflict_bucket(row: CatalogRow) -> Optional[str]:
    if row.bye_flags:
        flagged = [
            bucket
            for bucket, value in row.bye_flags.items()
            if _parse_flag(value, column=f"is_bye_week{bucket}", line=row.line)
        ]
        if len(flagged) > 1:
            raise CatalogError(
                f"line {row.line}: entity {row.raw_id!r} flagged for several bye weeks {flagged}"
            )
        return flagged[0] if flagged else None
    return _normalize_bucket(row.raw_bye_week)


def rows_to_entities(
    rows: Sequence[CatalogRow],
    *,
    flex_groups: Collection[str] = FLEX_GROUPS,
) -> List[EntityRecord]:
    flex = {group.upper() for group in flex_groups}
    entities: List[EntityRecord] = []
    for row in rows:
        if not row.raw_id:
            raise CatalogError(f"line {row.line}: missing entity identifier")
        group = row.raw_group.strip().upper()
        if not group:
            raise CatalogError(f"line {row.line}: entity {row.raw_id!r} has no group")
        values = {
            metric: _parse_number(raw, column=metric, line=row.line)
            for metric, raw in row.raw_values.items()
        }
        draft_values = {
            proxy: _parse_number(raw, column=proxy, line=row.line)
            for proxy, raw in row.raw_draft_values.items()
        }
        metadata: Dict[str, object] = {}
        if row.raw_team:
            metadata["team"] = row.raw_team.upper()
        if row.raw_bye_week:
            metadata["bye_week"] = row.raw_bye_week
        try:
            entities.append(
                EntityRecord(
                    entity_id=row.raw_id,
                    name=row.raw_name or row.raw_id,
                    group=group,
                    values=values,
                    draft_values=draft_values,
                    eligibility=_eligibility(row, group, flex),
                    conflict_bucket=_conflict_bucket(row),
                    metadata=metadata,
                )
            )
        except ValidationError as exc:
            raise CatalogError(f"line {row.line}: entity {row.raw_id!r} is invalid: {exc}") from exc
    return entities


def _resolve_columns(
    requested: Optional[Sequence[str]],
    known: Sequence[str],
    header: Sequence[str],
    *,
    kind: str,
    extra: Sequence[str] = (),
) -> List[str]:
    if requested is None:
        columns = [column for column in known if column in header]
        required = list(extra)
    else:
        columns = list(requested)
        required = [*requested, *extra]
    missing = [column for column in dict.fromkeys(required) if column not in header]
    if missing:
        raise CatalogError(f"Catalog is missing {kind} columns: {', '.join(missing)}")
    return list(dict.fromkeys([*columns, *extra]))


def load_catalog_rows(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
    metrics: Optional[Sequence[str]] = None,
    proxies: Optional[Sequence[str]] = None,
    extra_metrics: Sequence[str] = (),
    extra_proxies: Sequence[str] = (),
) -> List[CatalogRow]:
    mapping = {**DEFAULT_CATALOG_MAPPING, **(mapping or {})}
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        header = [column.strip() for column in (reader.fieldnames or [])]
        for key in ("entity_id", "group"):
            if mapping[key] not in header:
                raise CatalogError(f"Catalog {path} has no {key} column {mapping[key]!r}")
        metric_columns = _resolve_columns(
            metrics, METRIC_COLUMNS, header, kind="metric", extra=extra_metrics
        )
        proxy_columns = _resolve_columns(
            proxies, PROXY_COLUMNS, header, kind="draft value", extra=extra_proxies
        )
        rows = [
            CatalogRow.from_mapping(
                row,
                mapping,
                line=line,
                metrics=metric_columns,
                proxies=proxy_columns,
            )
            for line, row in enumerate(reader, start=2)
        ]
    logger.debug(
        "Read %s catalog rows from %s (metrics=%s, proxies=%s)",
        len(rows),
        path,
        metric_columns,
        proxy_columns,
    )
    return rows


def load_catalog_csv(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
    metrics: Optional[Sequence[str]] = None,
    proxies: Optional[Sequence[str]] = None,
    extra_metrics: Sequence[str] = (),
    extra_proxies: Sequence[str] = (),
    flex_groups: Collection[str] = FLEX_GROUPS,
) -> EntityCatalog:
    """Load ``path`` into an immutable catalog.

    Metric and proxy columns default to every known column present in the
    header.  ``extra_metrics`` and ``extra_proxies`` name columns that must be
    loaded on top of those, such as the ones a CLI run selects.  Empty or
    non-numeric values raise CatalogError rather than being read as zero.
    """

    rows = load_catalog_rows(
        path,
        mapping=mapping,
        metrics=metrics,
        proxies=proxies,
        extra_metrics=extra_metrics,
        extra_proxies=extra_proxies,
    )
    catalog = EntityCatalog(rows_to_entities(rows, flex_groups=flex_groups))
    logger.info(
        "Loaded catalog of %s entities from %s (%s conflict buckets)",
        len(catalog),
        path,
        len(catalog.conflict_buckets()),
    )
    return catalog
