"""
Fixed model constants for Box Plus-Minus.

The coefficient vectors are the published BPM 2.0 weights: one vector for a
pure point guard (position 1) and one for a pure center (position 5), for the
overall rating and for the offense-only rating. Nothing here is fitted at run
time; every table is created once at import and never mutated.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from ..errors import DataError


# Rating categories, in the order the coefficient vectors are published.
CATEGORIES: Tuple[str, ...] = (
    "adj_pts",
    "fga",
    "fta",
    "fg3m",  # bonus credit for made threes
    "ast",
    "tov",
    "orb",
    "drb",
    "trb",
    "stl",
    "blk",
    "pf",
)

# Usage / shot-creation weights follow offensive role, everything else follows position.
OFFENSIVE_ROLE_CATEGORIES = frozenset({"fga", "fta"})

CATEGORY_GROUPS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "scoring": ("adj_pts", "fga", "fta", "fg3m"),
        "ballhandling": ("ast", "tov"),
        "rebounding": ("orb", "drb", "trb"),
        "defense": ("stl", "blk", "pf"),
    }
)


@dataclass(frozen=True)
class CoefficientTable:
    """Position-1 and position-5 weights for one rating flavor plus its positional constants."""

    name: str
    pos1: Tuple[float, ...]
    pos5: Tuple[float, ...]
    position_constant_low: float  # K_low, scaled by (3 - position) / 2 below position 3
    role_constant_high: float  # K_high, slope on (offensive_role - 3) at or above position 3

    def __post_init__(self):
        if len(self.pos1) != len(CATEGORIES) or len(self.pos5) != len(CATEGORIES):
            raise DataError(
                f"coefficient table '{self.name}' needs {len(CATEGORIES)} weights per position"
            )

    def weights(self, category: str) -> Tuple[float, float]:
        idx = CATEGORIES.index(category)
        return self.pos1[idx], self.pos5[idx]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "pos1": dict(zip(CATEGORIES, self.pos1)),
            "pos5": dict(zip(CATEGORIES, self.pos5)),
            "position_constant_low": self.position_constant_low,
            "role_constant_high": self.role_constant_high,
        }


@dataclass(frozen=True)
class CoefficientSet:
    """Both rating flavors consumed by the raw rating calculator."""

    overall: CoefficientTable
    offensive: CoefficientTable


BPM_COEFFICIENTS = CoefficientTable(
    name="overall",
    #     adj_pts  fga     fta     fg3m   ast    tov     orb    drb     trb  stl    blk    pf
    pos1=(0.860, -0.560, -0.246, 0.389, 0.580, -0.964, 0.613, 0.116, 0.0, 1.369, 1.327, -0.367),
    pos5=(0.860, -0.780, -0.343, 0.389, 1.034, -0.964, 0.181, 0.181, 0.0, 1.008, 0.703, -0.367),
    position_constant_low=-0.818,
    role_constant_high=1.387,
)

OBPM_COEFFICIENTS = CoefficientTable(
    name="offensive",
    pos1=(0.605, -0.330, -0.145, 0.477, 0.476, -0.579, 0.606, -0.112, 0.0, 0.177, 0.725, -0.439),
    pos5=(0.605, -0.472, -0.201, 0.477, 0.476, -0.579, 0.422, 0.103, 0.0, 0.294, 0.097, -0.439),
    position_constant_low=-1.698,
    role_constant_high=0.430,
)

DEFAULT_COEFFICIENTS = CoefficientSet(overall=BPM_COEFFICIENTS, offensive=OBPM_COEFFICIENTS)


def _pairs(mapping: Mapping[str, float]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(k), float(v)) for k, v in mapping.items())


@dataclass(frozen=True)
class ModelConstants:
    """Regression constants and fixed parameters of the rating model."""

    # Rate normalization
    ft_attempt_weight: float = 0.44  # TSA = FGA + 0.44 * FTA
    points_baseline: float = 1.0  # adjusted points are scored against team pts/TSA minus this
    threshold_efficiency: float = -0.33  # per-TSA offset below team efficiency for threshold points
    minutes_per_game: float = 48.0
    roster_slots: int = 5

    # Position estimate: Pos = intercept + sum(coef * team share while on floor)
    position_intercept: float = 2.130
    position_share_coefficients: Tuple[Tuple[str, float], ...] = _pairs(
        {"trb": 8.668, "stl": -2.486, "pf": 0.992, "ast": -3.536, "blk": 1.667}
    )
    default_position: float = 3.0  # nominal value when the time-share label is unresolved
    position_prior_minutes: float = 50.0
    position_rounds: int = 4

    # Offensive role estimate: Role = intercept + sum(coef * share)
    role_intercept: float = 6.0
    role_share_coefficients: Tuple[Tuple[str, float], ...] = _pairs({"ast": -6.642, "thresh_pts": -8.544})
    default_role: float = 4.0
    role_prior_minutes: float = 10.0
    role_rounds: int = 3

    position_min: float = 1.0
    position_max: float = 5.0
    position_target: float = 3.0
    convergence_tolerance: float = 1e-6

    # Team adjustment
    lead_bonus_factor: float = 0.35

    # Derived metrics
    replacement_level: float = -2.0
    season_games: float = 82.0
    regression_intercept: float = 4.75
    regression_slope: float = 0.175
    regression_padding_games: float = 4.0
    regression_minutes: float = 450.0
    regression_divisor: float = 3.0

    def to_dict(self) -> dict:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = dict(value) if f.name.endswith("share_coefficients") else value
        return out

    @classmethod
    def from_dict(cls, data: Mapping) -> "ModelConstants":
        """Build constants from defaults overridden by ``data``."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise DataError(f"unknown model constants: {', '.join(unknown)}")

        overrides = {}
        for key, value in data.items():
            if key in ("position_share_coefficients", "role_share_coefficients"):
                if not isinstance(value, Mapping):
                    raise DataError(f"'{key}' must be an object of share -> coefficient")
                overrides[key] = _pairs(value)
            elif key in ("roster_slots", "position_rounds", "role_rounds"):
                overrides[key] = int(value)
            else:
                try:
                    overrides[key] = float(value)
                except (TypeError, ValueError):
                    raise DataError(f"model constant '{key}' must be numeric, got {value!r}")
        return replace(cls(), **overrides)


DEFAULT_CONSTANTS = ModelConstants()


def load_constants(path: Union[str, Path]) -> ModelConstants:
    """Load constant overrides from a JSON object on disk."""
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise DataError(f"constants file {path} must hold a JSON object")
    return ModelConstants.from_dict(data)
