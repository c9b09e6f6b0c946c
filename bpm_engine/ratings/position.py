"""
Position and offensive-role estimation.

Both estimates start from a regression on the player's share of team totals,
are blended toward a prior by minutes played, and are then pulled toward a
team mean of 3.0 by a fixed number of damped correction rounds. The round
counts are part of the published model; there is no convergence check beyond
the diagnostic reported when the final team mean misses 3.0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd

from ..errors import ConvergenceAssumptionViolation
from .constants import DEFAULT_CONSTANTS, ModelConstants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionEstimate:
    """Clamped values after the last round plus every intermediate round."""

    values: np.ndarray
    history: Tuple[np.ndarray, ...]
    team_average: float


def weighted_average(values, weights, default: float) -> float:
    """Minutes-weighted mean; ``default`` when nobody played."""
    weights = np.asarray(weights, dtype=float)
    total = weights.sum()
    if total <= 0:
        return default
    return float(np.dot(np.asarray(values, dtype=float), weights) / total)


def regression_seed(frame: pd.DataFrame, intercept: float, coefficients) -> np.ndarray:
    """``intercept + sum(coef * <share>_share)`` over the given share coefficients."""
    seed = np.full(len(frame), intercept, dtype=float)
    for share, coef in coefficients:
        seed = seed + coef * frame[f"{share}_share"].to_numpy(dtype=float)
    return seed


def blend_with_prior(seed, minutes, prior, prior_minutes: float) -> np.ndarray:
    """``(seed * MP + prior * W) / (MP + W)``."""
    minutes = np.asarray(minutes, dtype=float)
    return (np.asarray(seed, dtype=float) * minutes + np.asarray(prior, dtype=float) * prior_minutes) / (
        minutes + prior_minutes
    )


def converge_positions(
    estimate,
    minutes,
    rounds: int,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> PositionEstimate:
    """
    Run ``rounds`` damped corrections toward a team mean of ``position_target``.

    Each round takes the minutes-weighted mean of the current clamped values and
    subtracts its distance from the target from the running, unclamped
    estimate, which is then clamped again.
    """
    lo, hi, target = constants.position_min, constants.position_max, constants.position_target
    running = np.array(estimate, dtype=float)
    clamped = np.clip(running, lo, hi)
    history = [clamped]
    for _ in range(rounds):
        shift = weighted_average(clamped, minutes, target) - target
        running = running - shift
        clamped = np.clip(running, lo, hi)
        history.append(clamped)
    return PositionEstimate(
        values=clamped,
        history=tuple(history),
        team_average=weighted_average(clamped, minutes, target),
    )


def estimate_positions(
    frame: pd.DataFrame,
    team_code: str = "",
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> Tuple[pd.DataFrame, List[ConvergenceAssumptionViolation]]:
    """
    Add ``adj_position`` and ``offensive_role`` to a copy of a normalized roster.

    ``frame`` must carry the ``<stat>_share`` columns from the rate normalizer,
    ``minutes`` and the nominal ``position`` column. The unclamped regression
    outputs are kept as ``position_seed`` and ``offensive_role_seed``; they are
    inputs to the estimate, not estimates, and may fall outside [1, 5].
    """
    c = constants
    out = frame.copy()
    minutes = out["minutes"].to_numpy(dtype=float)

    pos_seed = regression_seed(out, c.position_intercept, c.position_share_coefficients)
    pos_blend = blend_with_prior(pos_seed, minutes, out["position"].to_numpy(dtype=float), c.position_prior_minutes)
    position = converge_positions(pos_blend, minutes, c.position_rounds, c)

    role_seed = regression_seed(out, c.role_intercept, c.role_share_coefficients)
    role_blend = blend_with_prior(role_seed, minutes, c.default_role, c.role_prior_minutes)
    role = converge_positions(role_blend, minutes, c.role_rounds, c)

    out["position_seed"] = pos_seed
    out["adj_position"] = position.values
    out["offensive_role_seed"] = role_seed
    out["offensive_role"] = role.values

    diagnostics = []
    for name, est in (("position", position), ("offensive_role", role)):
        if minutes.sum() > 0 and abs(est.team_average - c.position_target) > c.convergence_tolerance:
            violation = ConvergenceAssumptionViolation(
                team_code=team_code,
                estimate=name,
                team_average=est.team_average,
                tolerance=c.convergence_tolerance,
            )
            logger.warning(
                "Team %s %s average %.6f misses %.1f after fixed rounds",
                team_code, name, est.team_average, c.position_target,
            )
            diagnostics.append(violation)
    return out, diagnostics
