"""Command-line interface for solving snake-draft rosters from a catalog CSV."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from draftopt.analysis import attainment_ratio, roster_rows, write_roster_csv
from draftopt.config import DraftConfig, get_format
from draftopt.config_loader import CatalogProfile
from draftopt.exceptions import DraftOptimizerError, InvariantViolation
from draftopt.ingest import load_catalog_csv
from draftopt.optimizer import DraftResult, expand_scenarios, run_scenarios, solve_draft


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Solve an optimal snake-draft roster from a player catalog")
    parser.add_argument("catalog", type=Path, help="Path to catalog CSV")
    parser.add_argument("--format", default="STANDARD", help="Draft format key (e.g., STANDARD, TEN_TEAM)")
    parser.add_argument("--metric", default=None, help="Value column to maximize")
    parser.add_argument("--proxy", default=None, help="Draft value column (e.g., adp, max_draft_position)")
    parser.add_argument("--start-slot", type=int, default=None, help="Draft slot in round one")
    parser.add_argument("--teams", type=int, default=None, help="Number of teams in the league")
    parser.add_argument("--rounds", type=int, default=None, help="Number of rounds to draft")
    parser.add_argument(
        "--exclude-category",
        action="append",
        default=[],
        help="Drop a category requirement (e.g., te); may be repeated",
    )
    parser.add_argument("--no-group-caps", action="store_true", help="Remove every group cap")
    parser.add_argument(
        "--max-per-bye",
        type=int,
        default=None,
        help="Maximum players sharing a bye week (negative disables the cap)",
    )
    parser.add_argument(
        "--catalog-column",
        action="append",
        default=[],
        help="Mapping for catalog CSV columns (e.g., entity_id=player)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load catalog profile JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save catalog profile JSON", default=None)
    parser.add_argument("--sweep-metric", nargs="*", default=[], help="Solve once per metric")
    parser.add_argument("--sweep-proxy", nargs="*", default=[], help="Solve once per draft value proxy")
    parser.add_argument("--sweep-start-slot", nargs="*", type=int, default=[], help="Solve once per start slot")
    parser.add_argument(
        "--sweep-drop-category",
        nargs="*",
        default=[],
        help="Also solve with each listed category requirement removed",
    )
    parser.add_argument(
        "--compare-group-caps",
        action="store_true",
        help="Solve each scenario with and without group caps",
    )
    parser.add_argument(
        "--reference-metric",
        default=None,
        help="Solve a reference draft on this metric and report attainment against it",
    )
    parser.add_argument("--workers", type=int, default=1, help="Scenario solves to run in parallel")
    parser.add_argument("--solver", default=None, help="Solver backend (cbc or highs)")
    parser.add_argument("--output", type=Path, default=Path("rosters.csv"), help="Output CSV path")
    parser.add_argument("--quiet", action="store_true", help="Do not print objective values")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (e.g., INFO, DEBUG)")
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _selected_columns(args: argparse.Namespace) -> tuple[list[str], list[str]]:
    metrics = [args.metric, *args.sweep_metric, args.reference_metric]
    proxies = [args.proxy, *args.sweep_proxy]
    return [m for m in metrics if m], [p for p in proxies if p]


def _base_config(args: argparse.Namespace) -> DraftConfig:
    config = get_format(args.format)
    changes: Dict[str, object] = {}
    if args.metric:
        changes["active_metric"] = args.metric
    if args.proxy:
        changes["active_proxy"] = args.proxy
    if args.start_slot is not None:
        changes["start_slot"] = args.start_slot
    if args.teams is not None:
        changes["team_count"] = args.teams
    if args.rounds is not None:
        changes["round_count"] = args.rounds
    if args.max_per_bye is not None:
        changes["max_per_conflict_bucket"] = args.max_per_bye if args.max_per_bye >= 0 else None
    if changes:
        config = config.replace(**changes)
    for category in args.exclude_category:
        config = config.without_category(category)
    if args.no_group_caps:
        config = config.without_group_caps()
    return config


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    profile = CatalogProfile.load(args.load_profile) if args.load_profile else CatalogProfile()
    column_mapping = profile.column_mapping | _parse_mapping(args.catalog_column)

    extra_metrics, extra_proxies = _selected_columns(args)
    try:
        catalog = load_catalog_csv(
            args.catalog,
            mapping=column_mapping or None,
            metrics=profile.metric_columns,
            proxies=profile.proxy_columns,
            extra_metrics=extra_metrics,
            extra_proxies=extra_proxies,
        )
        base = _base_config(args)
    except (DraftOptimizerError, KeyError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    if args.save_profile:
        CatalogProfile(column_mapping, profile.metric_columns, profile.proxy_columns).save(args.save_profile)
        print(f"Saved catalog profile to {args.save_profile}")

    print(f"Loaded {len(catalog)} entities from {args.catalog}")

    scenarios = expand_scenarios(
        base,
        metrics=args.sweep_metric,
        proxies=args.sweep_proxy,
        start_slots=args.sweep_start_slot,
        drop_categories=[None, *args.sweep_drop_category] if args.sweep_drop_category else (),
        group_caps=(True, False) if args.compare_group_caps else (),
    )
    results = run_scenarios(
        catalog,
        scenarios,
        workers=args.workers,
        verbose=not args.quiet,
        solver_choice=args.solver,
    )

    reference: Optional[DraftResult] = None
    if args.reference_metric:
        try:
            reference = solve_draft(
                catalog,
                base.replace(active_metric=args.reference_metric),
                verbose=False,
                solver_choice=args.solver,
            )
        except InvariantViolation:
            raise
        except DraftOptimizerError as exc:
            print(f"Reference draft on {args.reference_metric} failed: {exc}")

    rows_by_scenario = {}
    failures = 0
    for outcome in results:
        name = outcome.scenario.name
        if not outcome.ok:
            failures += 1
            print(f"{name}: failed – {outcome.error}")
            continue
        result = outcome.result
        rows_by_scenario[name] = roster_rows(result, catalog)
        line = f"{name}: {result.objective:.1f} {result.config.active_metric}"
        if reference is not None:
            ratio = attainment_ratio(
                result.assignment,
                reference.assignment,
                catalog,
                args.reference_metric,
            )
            line += f", attainment {ratio * 100:.1f}%"
        print(line)

    written = write_roster_csv(args.output, rows_by_scenario)
    print(f"Wrote {written} roster rows for {len(rows_by_scenario)} scenarios to {args.output}")
    if failures:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
