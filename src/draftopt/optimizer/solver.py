"""Solver selection and invocation for built draft models."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, Optional

import pulp

from draftopt.exceptions import InfeasibleError, SolverError, UnboundedError
from draftopt.optimizer.model import DraftModel, VariableKey


logger = logging.getLogger(__name__)

_SOLVER_ENV = "DRAFTOPT_SOLVER"
_SOLVER_GAP_ENV = "DRAFTOPT_SOLVER_GAP"
_SOLVER_TIME_LIMIT_ENV = "DRAFTOPT_SOLVER_TIME_LIMIT"
_SOLVER_MSG_ENV = "DRAFTOPT_SOLVER_MSG"


def _env_float(name: str, default: Optional[float], *, clamp_min: float | None = None) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %s", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SolveOutcome:
    objective: float
    values: Dict[VariableKey, float]
    status: str
    solver: str
    seconds: float


def _solver_options() -> dict:
    options: dict = {"msg": _env_flag(_SOLVER_MSG_ENV)}
    gap = _env_float(_SOLVER_GAP_ENV, None, clamp_min=0.0)
    if gap:
        options["gapRel"] = gap
    time_limit = _env_float(_SOLVER_TIME_LIMIT_ENV, None, clamp_min=0.0)
    if time_limit:
        options["timeLimit"] = time_limit
    return options


def resolve_solver(choice: Optional[str] = None):
    """Return ``(solver, label)`` for the requested backend, falling back to CBC."""

    solver_choice = (choice or os.getenv(_SOLVER_ENV, "cbc")).strip().lower()
    options = _solver_options()

    if solver_choice in {"highs", "highs_cmd", "hi_gs"}:
        try:
            from pulp.apis.highs_api import HiGHS_CMD

            candidate = HiGHS_CMD(**options)
            if getattr(candidate, "available", lambda: True)():
                return candidate, "HiGHS"
            logger.warning("HiGHS solver unavailable (missing binary); falling back to CBC")
        except ImportError:
            logger.warning("HiGHS solver package not available; falling back to CBC")
    elif solver_choice not in {"cbc", "pulp_cbc", "coin"}:
        logger.warning("Unknown solver %r requested; using CBC", solver_choice)

    return pulp.PULP_CBC_CMD(**options), "CBC"


def solve_model(model: DraftModel, *, solver_choice: Optional[str] = None) -> SolveOutcome:
    """Solve ``model`` to proven optimality or raise.

    Infeasible problems raise InfeasibleError and are never retried.  Any other
    non-optimal termination, including a time limit hit before optimality is
    proven, raises SolverError.
    """

    solver, label = resolve_solver(solver_choice)
    start = time.perf_counter()
    try:
        status = model.problem.solve(solver)
    except pulp.PulpError as exc:
        raise SolverError(f"{label} failed: {exc}") from exc
    elapsed = time.perf_counter() - start
    status_label = pulp.LpStatus.get(status, str(status))

    if status == pulp.LpStatusInfeasible:
        logger.warning("Draft model infeasible (%s, %.2fs)", label, elapsed)
        raise InfeasibleError(
            "No draft satisfies every constraint; relax a requirement or cap and re-run"
        )
    if status == pulp.LpStatusUnbounded:
        raise UnboundedError(f"{label} reported an unbounded objective")
    if status != pulp.LpStatusOptimal:
        raise SolverError(f"{label} terminated with status {status_label!r}")

    sol_status = getattr(model.problem, "sol_status", pulp.LpSolutionOptimal)
    if sol_status not in (pulp.LpSolutionOptimal, pulp.LpSolutionNoSolutionFound):
        raise SolverError(
            f"{label} stopped before proving optimality "
            f"({pulp.LpSolution.get(sol_status, sol_status)})"
        )

    values: Dict[VariableKey, float] = {}
    for key, variable in model.variables.items():
        resolved = variable.varValue
        if resolved is None:
            raise SolverError(f"{label} left variable {variable.name} unresolved")
        values[key] = float(resolved)

    objective = pulp.value(model.problem.objective)
    if objective is None:
        raise SolverError(f"{label} returned no objective value")

    logger.info("Solved draft model with %s – objective %.2f (%.2fs)", label, objective, elapsed)
    return SolveOutcome(
        objective=float(objective),
        values=values,
        status=status_label,
        solver=label,
        seconds=elapsed,
    )
