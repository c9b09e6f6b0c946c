"""Final ratings, contribution, VORP and minutes-regressed ratings."""

from __future__ import annotations

import numpy as np
import pandas as pd

from ..models.team import TeamContext, TeamSeasonTotals
from .constants import DEFAULT_CONSTANTS, ModelConstants
from .rates import safe_divide


def regression_expectation(minutes, games, constants: ModelConstants = DEFAULT_CONSTANTS):
    """Expected rating from minutes per game, padded with extra games."""
    mpg = safe_divide(minutes, np.asarray(games, dtype=float) + constants.regression_padding_games)
    return constants.regression_intercept + constants.regression_slope * mpg


def regression_weight(minutes, constants: ModelConstants = DEFAULT_CONSTANTS):
    """Pseudo-minutes of expectation blended in; zero from ``regression_minutes`` up."""
    minutes = np.asarray(minutes, dtype=float)
    return np.maximum((constants.regression_minutes - minutes) / constants.regression_divisor, 0.0)


def regress(rating, minutes, expectation, weight):
    """Minutes-weighted blend of ``rating`` with ``weight`` pseudo-minutes of ``expectation``."""
    minutes = np.asarray(minutes, dtype=float)
    total = minutes + weight
    return np.asarray(rating, dtype=float) * safe_divide(minutes, total) + expectation * safe_divide(weight, total)


def vorp(bpm, floor_share, team_games: float, constants: ModelConstants = DEFAULT_CONSTANTS):
    """Value over a replacement-level player, scaled to a full season."""
    return (
        (np.asarray(bpm, dtype=float) - constants.replacement_level)
        * np.asarray(floor_share, dtype=float)
        * team_games
        / constants.season_games
    )


def finalize_ratings(
    frame: pd.DataFrame,
    team: TeamSeasonTotals,
    context: TeamContext,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> pd.DataFrame:
    """Apply the team corrections and compute every derived metric on a copy of ``frame``."""
    out = frame.copy()
    minutes = out["minutes"].to_numpy(dtype=float)
    games = out["games"].to_numpy(dtype=float)
    floor_share = out["floor_share"].to_numpy(dtype=float)

    out["team_correction"] = context.correction
    out["team_offensive_correction"] = context.offensive_correction
    bpm = out["raw_bpm"].to_numpy(dtype=float) + context.correction
    obpm = out["raw_off_bpm"].to_numpy(dtype=float) + context.offensive_correction
    out["bpm"] = bpm
    out["obpm"] = obpm
    out["dbpm"] = bpm - obpm

    out["contribution"] = bpm * floor_share
    out["vorp"] = vorp(bpm, floor_share, team.games, constants)

    expectation = regression_expectation(minutes, games, constants)
    weight = regression_weight(minutes, constants)
    out["regression_expectation"] = expectation
    out["regression_weight"] = weight
    out["regressed_bpm"] = regress(bpm, minutes, expectation, weight)
    out["regressed_obpm"] = regress(obpm, minutes, expectation, weight)
    out["regressed_dbpm"] = out["regressed_bpm"] - out["regressed_obpm"]
    return out
