"""Reconcile summed raw player ratings with team efficiency."""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from ..errors import DataError
from ..models.team import TeamContext, TeamSeasonTotals
from .constants import DEFAULT_CONSTANTS, ModelConstants

logger = logging.getLogger(__name__)


def league_offensive_rating(teams: Iterable[TeamSeasonTotals]) -> float:
    """Unweighted mean of team offensive ratings."""
    ortgs = [float(team.ortg) for team in teams]
    if not ortgs:
        raise DataError("league offensive rating needs at least one team")
    return float(np.mean(ortgs))


def build_team_context(
    team: TeamSeasonTotals,
    frame: pd.DataFrame,
    league_ortg: float,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> TeamContext:
    """
    Compute the team's adjusted ratings and the uniform per-player corrections.

    The average lead is ``net * pace / 100 / 2``; the lead bonus is
    ``lead_bonus_factor / 2 * average_lead`` and only half of it is credited to
    the offensive rating. The correction spreads the gap between the adjusted
    team rating and ``sum(raw * floor_share)`` over the five roster slots.
    """
    relative_ortg = team.ortg - league_ortg
    relative_drtg = team.drtg - league_ortg
    net_rating = team.net_rating if team.net_rating is not None else relative_ortg - relative_drtg

    average_lead = net_rating * team.pace / 100.0 / 2.0
    lead_bonus = constants.lead_bonus_factor / 2.0 * average_lead
    adjusted_net = net_rating + lead_bonus
    adjusted_ortg = relative_ortg + lead_bonus / 2.0

    floor_share = frame["floor_share"].to_numpy(dtype=float)
    raw_contribution = float(np.dot(frame["raw_bpm"].to_numpy(dtype=float), floor_share))
    raw_off_contribution = float(np.dot(frame["raw_off_bpm"].to_numpy(dtype=float), floor_share))

    slots = constants.roster_slots
    context = TeamContext(
        team=team.team,
        league_ortg=float(league_ortg),
        relative_ortg=float(relative_ortg),
        relative_drtg=float(relative_drtg),
        net_rating=float(net_rating),
        average_lead=float(average_lead),
        lead_bonus=float(lead_bonus),
        adjusted_net_rating=float(adjusted_net),
        adjusted_ortg=float(adjusted_ortg),
        raw_contribution=raw_contribution,
        raw_offensive_contribution=raw_off_contribution,
        correction=(adjusted_net - raw_contribution) / slots,
        offensive_correction=(adjusted_ortg - raw_off_contribution) / slots,
    )
    logger.debug(
        "Team %s: adj net %.3f, raw sum %.3f, correction %.3f (off %.3f)",
        team.team, adjusted_net, raw_contribution, context.correction, context.offensive_correction,
    )
    return context
