"""Run the draft model across configuration scenarios."""

from __future__ import annotations

import itertools
import logging
import multiprocessing as mp
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from draftopt.config import DraftConfig
from draftopt.exceptions import ConfigurationError, InfeasibleError, SolverError
from draftopt.models import EntityCatalog
from draftopt.optimizer.decoder import Assignment, decode_assignment
from draftopt.optimizer.model import build_model
from draftopt.optimizer.solver import solve_model


logger = logging.getLogger(__name__)

# Errors that end a single scenario without stopping the batch.
_SCENARIO_ERRORS = (ConfigurationError, InfeasibleError, SolverError)


@dataclass(frozen=True)
class DraftResult:
    config: DraftConfig
    objective: float
    assignment: Assignment
    status: str
    solver: str
    seconds: float


@dataclass(frozen=True)
class Scenario:
    name: str
    config: DraftConfig


@dataclass(frozen=True)
class ScenarioResult:
    scenario: Scenario
    result: Optional[DraftResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def solve_draft(
    catalog: EntityCatalog,
    config: DraftConfig,
    *,
    verbose: bool = True,
    solver_choice: Optional[str] = None,
) -> DraftResult:
    """Build, solve and decode a single draft."""

    model = build_model(catalog, config)
    outcome = solve_model(model, solver_choice=solver_choice)
    assignment = decode_assignment(outcome.values, config.round_count)
    if verbose:
        print(f"Total Projected Points:\t{int(round(outcome.objective))}")
    return DraftResult(
        config=config,
        objective=outcome.objective,
        assignment=assignment,
        status=outcome.status,
        solver=outcome.solver,
        seconds=outcome.seconds,
    )


def _scenario_name(parts: Sequence[str]) -> str:
    return ",".join(parts) if parts else "base"


def expand_scenarios(
    base: DraftConfig,
    *,
    metrics: Iterable[str] = (),
    proxies: Iterable[str] = (),
    start_slots: Iterable[int] = (),
    drop_categories: Iterable[Optional[str]] = (),
    group_caps: Iterable[bool] = (),
) -> List[Scenario]:
    """Cartesian product of the requested override axes.

    An empty axis keeps the base value.  ``drop_categories`` entries of None
    keep every requirement; ``group_caps`` False removes every group cap.
    """

    metric_axis = list(metrics) or [None]
    proxy_axis = list(proxies) or [None]
    slot_axis = list(start_slots) or [None]
    drop_axis = list(drop_categories) or [None]
    cap_axis = list(group_caps) or [None]

    scenarios: List[Scenario] = []
    for metric, proxy, slot, drop, caps in itertools.product(
        metric_axis, proxy_axis, slot_axis, drop_axis, cap_axis
    ):
        config = base
        parts: List[str] = []
        if metric is not None:
            config = config.replace(active_metric=metric)
            parts.append(f"metric={metric}")
        if proxy is not None:
            config = config.replace(active_proxy=proxy)
            parts.append(f"proxy={proxy}")
        if slot is not None:
            config = config.replace(start_slot=int(slot))
            parts.append(f"slot={slot}")
        if drop:
            config = config.without_category(drop)
            parts.append(f"no_{drop.lower()}")
        if caps is False:
            config = config.without_group_caps()
            parts.append("uncapped")
        scenarios.append(Scenario(name=_scenario_name(parts), config=config))
    return scenarios


def run_scenario(
    catalog: EntityCatalog,
    scenario: Scenario,
    *,
    verbose: bool = False,
    solver_choice: Optional[str] = None,
) -> ScenarioResult:
    try:
        result = solve_draft(catalog, scenario.config, verbose=verbose, solver_choice=solver_choice)
    except _SCENARIO_ERRORS as exc:
        logger.warning("Scenario %s failed: %s", scenario.name, exc)
        return ScenarioResult(scenario=scenario, error=f"{type(exc).__name__}: {exc}")
    return ScenarioResult(scenario=scenario, result=result)


def _scenario_worker(
    index: int,
    catalog: EntityCatalog,
    scenario: Scenario,
    solver_choice: Optional[str],
    queue: mp.Queue,
) -> None:
    try:
        queue.put((index, run_scenario(catalog, scenario, solver_choice=solver_choice)))
    except Exception as exc:  # pragma: no cover - worker errors bubble to parent
        queue.put((index, exc))


def run_scenarios(
    catalog: EntityCatalog,
    scenarios: Sequence[Scenario],
    *,
    workers: int = 1,
    verbose: bool = False,
    solver_choice: Optional[str] = None,
) -> List[ScenarioResult]:
    """Solve every scenario independently, returning results in input order.

    Each scenario builds its own model; nothing is cached between solves.  With
    ``workers > 1`` scenarios run in spawned processes.
    """

    scenarios = list(scenarios)
    workers = max(1, workers)
    run_start = time.perf_counter()
    logger.info("Running %s scenarios – workers=%s", len(scenarios), workers)

    if workers == 1 or len(scenarios) <= 1:
        results = []
        for scenario in scenarios:
            outcome = run_scenario(catalog, scenario, verbose=verbose, solver_choice=solver_choice)
            logger.info(
                "Scenario %s %s (total %.2fs)",
                scenario.name,
                "solved" if outcome.ok else "failed",
                time.perf_counter() - run_start,
            )
            results.append(outcome)
        return results

    ctx = mp.get_context("spawn")
    queue: mp.Queue = ctx.Queue()
    processes: dict[int, mp.Process] = {}
    collected: dict[int, ScenarioResult] = {}
    pending = list(enumerate(scenarios))

    def start_job() -> None:
        index, scenario = pending.pop(0)
        proc = ctx.Process(
            target=_scenario_worker,
            args=(index, catalog, scenario, solver_choice, queue),
        )
        proc.start()
        processes[index] = proc

    try:
        while len(processes) < workers and pending:
            start_job()

        while processes:
            index, outcome = queue.get()
            if isinstance(outcome, Exception):
                raise outcome
            proc = processes.pop(index, None)
            if proc is not None:
                proc.join()
            collected[index] = outcome
            if verbose and outcome.ok:
                print(f"Total Projected Points:\t{int(round(outcome.result.objective))}")
            logger.info(
                "Scenario %s %s (%s/%s, total %.2fs)",
                outcome.scenario.name,
                "solved" if outcome.ok else "failed",
                len(collected),
                len(scenarios),
                time.perf_counter() - run_start,
            )
            while len(processes) < workers and pending:
                start_job()
    finally:
        for proc in processes.values():
            if proc.is_alive():
                proc.terminate()

    return [collected[index] for index in range(len(scenarios))]
