"""League-wide Box Plus-Minus engine."""

from .errors import ConvergenceAssumptionViolation, DataError, MissingInputError
from .pipeline import LeagueConfig, LeagueResult, TeamResult, compute_league, compute_team

__version__ = "0.1.0"

__all__ = [
    "ConvergenceAssumptionViolation",
    "DataError",
    "LeagueConfig",
    "LeagueResult",
    "MissingInputError",
    "TeamResult",
    "compute_league",
    "compute_team",
]
