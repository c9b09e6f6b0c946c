"""Rate a single team: rates, positions, coefficients, raw and adjusted BPM."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Union

import pandas as pd

from ..data.validators import validate_roster_frame, validate_team_totals
from ..errors import ConvergenceAssumptionViolation, MissingInputError
from ..models.player import PlayerSeasonTotals
from ..models.team import TeamContext, TeamSeasonTotals
from ..ratings.coefficients import attach_coefficients
from ..ratings.constants import DEFAULT_COEFFICIENTS, DEFAULT_CONSTANTS, CoefficientSet, ModelConstants
from ..ratings.derived import finalize_ratings
from ..ratings.position import estimate_positions
from ..ratings.rates import normalize_rates
from ..ratings.raw_rating import compute_raw_ratings
from ..ratings.team_adjustment import build_team_context

logger = logging.getLogger(__name__)

TeamInput = Union[TeamSeasonTotals, Mapping, None]
RosterInput = Union[pd.DataFrame, Iterable[Union[PlayerSeasonTotals, Mapping]], None]

# Leading columns of every result table; the remaining derived columns follow.
SUMMARY_COLUMNS = [
    "player_id",
    "name",
    "team",
    "games",
    "minutes",
    "mpg",
    "floor_share",
    "position",
    "position_defaulted",
    "adj_position",
    "offensive_role",
    "raw_bpm",
    "raw_off_bpm",
    "bpm",
    "obpm",
    "dbpm",
    "contribution",
    "vorp",
    "regressed_bpm",
    "regressed_obpm",
    "regressed_dbpm",
]


@dataclass
class TeamResult:
    """Per-player ratings for one team plus the context that produced them."""

    team_code: str
    players: pd.DataFrame
    context: TeamContext
    diagnostics: List[ConvergenceAssumptionViolation] = field(default_factory=list)

    @property
    def defaulted_positions(self) -> int:
        return int(self.players["position_defaulted"].sum())

    def to_dict(self) -> dict:
        return {
            "team_code": self.team_code,
            "context": self.context.to_dict(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "defaulted_positions": self.defaulted_positions,
            "players": self.players[SUMMARY_COLUMNS].to_dict(orient="records"),
        }


def resolve_team_totals(team_code: str, team_totals: TeamInput) -> TeamSeasonTotals:
    """Validate team totals and return them as a dataclass; raises MissingInputError when unusable."""
    if team_totals is None:
        raise MissingInputError(f"team totals missing for {team_code}", team_code=team_code)
    payload = team_totals.to_dict() if isinstance(team_totals, TeamSeasonTotals) else dict(team_totals)
    payload.setdefault("team", team_code)
    errors = validate_team_totals(payload)
    if errors:
        raise MissingInputError(
            f"invalid team totals for {team_code}: {'; '.join(errors)}", team_code=team_code, problems=errors
        )
    return TeamSeasonTotals.from_dict(payload)


def _roster_frame(team_code: str, roster_totals: RosterInput, default_position: float) -> pd.DataFrame:
    if roster_totals is None:
        raise MissingInputError(f"roster totals missing for {team_code}", team_code=team_code)
    if isinstance(roster_totals, pd.DataFrame):
        frame = roster_totals.copy()
    else:
        frame = pd.DataFrame.from_records(
            [r.to_dict() if isinstance(r, PlayerSeasonTotals) else dict(r) for r in roster_totals]
        )

    errors = validate_roster_frame(frame, team_code)
    if errors:
        raise MissingInputError(
            f"invalid roster for {team_code}: {'; '.join(errors)}", team_code=team_code, problems=errors
        )

    frame = frame.reset_index(drop=True)
    frame["player_id"] = frame["player_id"].astype(str)
    frame["team"] = team_code
    if "name" not in frame.columns:
        frame["name"] = ""
    if "plus_minus" not in frame.columns:
        frame["plus_minus"] = 0.0

    position = pd.to_numeric(frame["position"], errors="coerce") if "position" in frame.columns else None
    defaulted = position.isna() if position is not None else pd.Series(True, index=frame.index)
    if "position_defaulted" in frame.columns:
        defaulted = defaulted | frame["position_defaulted"].fillna(False).astype(bool)
    frame["position_defaulted"] = defaulted.to_numpy(dtype=bool)
    if position is None:
        frame["position"] = default_position
    else:
        frame["position"] = position.fillna(default_position).astype(float)
    return frame


def compute_team(
    team_code: str,
    team_totals: TeamInput,
    roster_totals: RosterInput,
    coefficients: CoefficientSet = DEFAULT_COEFFICIENTS,
    constants: ModelConstants = DEFAULT_CONSTANTS,
    league_ortg: Optional[float] = None,
) -> TeamResult:
    """
    Compute BPM and its derived metrics for every player on one team.

    Pure function of its inputs: inputs are copied, never modified.

    Args:
        team_code: Team identifier stamped on every output row
        team_totals: Team season totals (dataclass or mapping)
        roster_totals: Player season totals (frame, dataclasses or mappings)
        coefficients: Position-1 / position-5 weight tables
        constants: Model constants
        league_ortg: League average offensive rating; the team's own ORtg when
            omitted, which makes its offense league-average

    Returns:
        TeamResult with one row per player

    Raises:
        MissingInputError: team totals absent or a required player field missing
    """
    team = resolve_team_totals(team_code, team_totals)
    roster = _roster_frame(team_code, roster_totals, constants.default_position)
    if league_ortg is None:
        logger.debug("No league ORtg for %s; using the team's own %.3f", team_code, team.ortg)
        league_ortg = team.ortg

    frame = normalize_rates(team, roster, constants)
    frame, diagnostics = estimate_positions(frame, team_code, constants)
    frame = attach_coefficients(frame, coefficients)
    frame = compute_raw_ratings(frame, coefficients)
    context = build_team_context(team, frame, league_ortg, constants)
    frame = finalize_ratings(frame, team, context, constants)

    leading = [c for c in SUMMARY_COLUMNS if c in frame.columns]
    frame = frame[leading + [c for c in frame.columns if c not in leading]]
    logger.debug("Rated %d players for %s", len(frame), team_code)
    return TeamResult(team_code=team_code, players=frame, context=context, diagnostics=diagnostics)

