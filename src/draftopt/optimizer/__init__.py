"""Snake-draft binary integer program built on PuLP."""

from .decoder import Assignment, DraftPick, decode_assignment
from .model import DraftModel, build_model
from .scenarios import (
    DraftResult,
    Scenario,
    ScenarioResult,
    expand_scenarios,
    run_scenario,
    run_scenarios,
    solve_draft,
)
from .snake import draft_position_bounds, even_round_bound, odd_round_bound, round_bound
from .solver import SolveOutcome, solve_model

__all__ = [
    "Assignment",
    "DraftPick",
    "decode_assignment",
    "DraftModel",
    "build_model",
    "DraftResult",
    "Scenario",
    "ScenarioResult",
    "expand_scenarios",
    "run_scenario",
    "run_scenarios",
    "solve_draft",
    "draft_position_bounds",
    "even_round_bound",
    "odd_round_bound",
    "round_bound",
    "SolveOutcome",
    "solve_model",
]
