"""Error taxonomy shared by the model builder, solver adapter and evaluators."""

from __future__ import annotations


class DraftOptimizerError(Exception):
    """Base class for every error raised by draftopt."""


class ConfigurationError(DraftOptimizerError, ValueError):
    """Raised when a draft configuration or catalog cannot produce a valid model."""


class CatalogError(ConfigurationError):
    """Raised when a catalog row is missing data or cannot be parsed."""


class InfeasibleError(DraftOptimizerError):
    """Raised when no draft satisfies every constraint."""


class SolverError(DraftOptimizerError):
    """Raised on numerical or solver-internal failure."""


class UnboundedError(SolverError):
    """Raised when the solver reports an unbounded objective."""


class InvariantViolation(DraftOptimizerError):
    """Raised when solver output disagrees with the model it was asked to solve."""


class ZeroReferenceError(DraftOptimizerError, ZeroDivisionError):
    """Raised when a ratio is taken against a reference total of zero."""


__all__ = [
    "DraftOptimizerError",
    "ConfigurationError",
    "CatalogError",
    "InfeasibleError",
    "SolverError",
    "UnboundedError",
    "InvariantViolation",
    "ZeroReferenceError",
]
