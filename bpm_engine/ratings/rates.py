"""
Rate normalization: raw season totals to per-100-possession rates.

Every ratio goes through :func:`safe_divide`, so a zero or missing
denominator yields 0 for the derived value instead of raising. Per field:

* ``pts_per_tsa``, ``ts_pct``, ``adj_pts``, ``thresh_pts``: 0 when the player
  (or team, for the team baseline) has no true shooting attempts.
* ``possessions`` and every ``<stat>_100`` rate: 0 when the player has no
  minutes or the team pace is 0.
* ``floor_share``: 0 when team minutes are 0.
* ``<stat>_share``: 0 when the team total is 0 or the player's floor share is 0.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ..models.team import TeamSeasonTotals
from .constants import CATEGORIES, DEFAULT_CONSTANTS, ModelConstants

logger = logging.getLogger(__name__)

SHARE_STATS = ("trb", "stl", "blk", "ast", "pf")


def safe_divide(numerator, denominator):
    """Elementwise ``numerator / denominator`` with 0 wherever the denominator is 0 or NaN."""
    num = np.asarray(numerator, dtype=float)
    den = np.asarray(denominator, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = np.where((den != 0) & np.isfinite(den), num / den, 0.0)
    if out.ndim == 0:
        return float(out)
    return out


def team_points_per_tsa(team: TeamSeasonTotals, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    tsa = team.fga + constants.ft_attempt_weight * team.fta
    return safe_divide(team.points, tsa)


def normalize_rates(
    team: TeamSeasonTotals,
    roster: pd.DataFrame,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> pd.DataFrame:
    """
    Add shooting, per-100 and team-share columns to a copy of ``roster``.

    Args:
        team: Team season totals (pace, minutes and the share denominators)
        roster: One row per player with the raw counting totals
        constants: Model constants

    Returns:
        New frame with ``tsa``, ``pts_per_tsa``, ``ts_pct``, ``adj_pts``,
        ``possessions``, ``<category>_100``, ``floor_share``, ``thresh_pts`` and
        ``<stat>_share`` columns added.
    """
    frame = roster.copy()
    c = constants

    team_tsa = team.fga + c.ft_attempt_weight * team.fta
    team_eff = team_points_per_tsa(team, c)

    tsa = frame["fga"].to_numpy(dtype=float) + c.ft_attempt_weight * frame["fta"].to_numpy(dtype=float)
    points = frame["points"].to_numpy(dtype=float)
    pts_per_tsa = safe_divide(points, tsa)

    frame["tsa"] = tsa
    frame["pts_per_tsa"] = pts_per_tsa
    frame["ts_pct"] = safe_divide(points, 2.0 * tsa)
    # Points relative to what the team's average shot would have produced, re-centred on the baseline.
    frame["adj_pts"] = (pts_per_tsa - team_eff + c.points_baseline) * tsa

    minutes = frame["minutes"].to_numpy(dtype=float)
    frame["mpg"] = safe_divide(minutes, frame["games"].to_numpy(dtype=float))
    frame["possessions"] = minutes * team.pace / c.minutes_per_game
    for category in CATEGORIES:
        frame[f"{category}_100"] = safe_divide(frame[category].to_numpy(dtype=float), frame["possessions"]) * 100.0

    floor_share = safe_divide(minutes, team.minutes / c.roster_slots)
    frame["floor_share"] = floor_share

    for stat in SHARE_STATS:
        team_share = safe_divide(frame[stat].to_numpy(dtype=float), getattr(team, stat))
        frame[f"{stat}_share"] = safe_divide(team_share, floor_share)

    threshold = team_eff + c.threshold_efficiency
    frame["thresh_pts"] = tsa * (pts_per_tsa - threshold)
    team_thresh = team_tsa * (team_eff - threshold)
    frame["thresh_pts_share"] = safe_divide(safe_divide(frame["thresh_pts"], team_thresh), floor_share)

    if team_tsa == 0 or team.minutes == 0:
        logger.debug(
            "Team %s has degenerate totals (tsa=%s, minutes=%s); dependent rates set to 0",
            team.team, team_tsa, team.minutes,
        )
    return frame
