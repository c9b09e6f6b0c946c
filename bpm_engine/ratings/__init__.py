"""Box Plus-Minus model stages."""

from .coefficients import attach_coefficients, interpolate, interpolate_table
from .constants import (
    BPM_COEFFICIENTS,
    CATEGORIES,
    DEFAULT_COEFFICIENTS,
    DEFAULT_CONSTANTS,
    OBPM_COEFFICIENTS,
    CoefficientSet,
    CoefficientTable,
    ModelConstants,
    load_constants,
)
from .derived import finalize_ratings
from .position import converge_positions, estimate_positions
from .rates import normalize_rates, safe_divide
from .raw_rating import compute_raw_ratings, positional_constant
from .team_adjustment import build_team_context, league_offensive_rating

__all__ = [
    "BPM_COEFFICIENTS",
    "CATEGORIES",
    "DEFAULT_COEFFICIENTS",
    "DEFAULT_CONSTANTS",
    "OBPM_COEFFICIENTS",
    "CoefficientSet",
    "CoefficientTable",
    "ModelConstants",
    "attach_coefficients",
    "build_team_context",
    "compute_raw_ratings",
    "converge_positions",
    "estimate_positions",
    "finalize_ratings",
    "interpolate",
    "interpolate_table",
    "league_offensive_rating",
    "load_constants",
    "normalize_rates",
    "positional_constant",
    "safe_divide",
]
