"""Season-total providers consumed by the league pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional

import pandas as pd

from ..errors import DataError, MissingInputError
from ..models.team import TeamSeasonTotals
from .positions import attach_nominal_positions


class TotalsProvider(ABC):
    """Source of materialised team and roster totals, keyed by team code."""

    @abstractmethod
    def team_codes(self) -> List[str]:
        """Team codes this provider can serve."""
        pass

    @abstractmethod
    def team_totals(self, team_code: str) -> TeamSeasonTotals:
        """Team season totals; raises MissingInputError when the team is unknown."""
        pass

    @abstractmethod
    def roster_totals(self, team_code: str) -> pd.DataFrame:
        """One row per player stint on the team."""
        pass


class FrameTotalsProvider(TotalsProvider):
    """Serves totals from in-memory player and team frames."""

    def __init__(
        self,
        players: pd.DataFrame,
        teams: pd.DataFrame,
        positions: Optional[Mapping[str, object]] = None,
    ):
        """
        Args:
            players: Player season totals with a ``team`` column
            teams: Team season totals, one row per team
            positions: Optional player id -> nominal position lookup; when given
                it replaces any ``position`` column on ``players``
        """
        for name, frame in (("players", players), ("teams", teams)):
            if "team" not in frame.columns:
                raise DataError(f"{name} frame needs a 'team' column")
        self.players = players
        self.teams = teams
        self.positions = positions

    def team_codes(self) -> List[str]:
        return [str(code) for code in self.teams["team"].drop_duplicates()]

    def team_totals(self, team_code: str) -> TeamSeasonTotals:
        rows = self.teams[self.teams["team"] == team_code]
        if rows.empty:
            raise MissingInputError(f"no team totals for {team_code}", team_code=team_code)
        if len(rows) > 1:
            raise DataError(f"duplicate team totals for {team_code}")
        return TeamSeasonTotals.from_dict(rows.iloc[0].to_dict())

    def roster_totals(self, team_code: str) -> pd.DataFrame:
        roster = self.players[self.players["team"] == team_code].reset_index(drop=True)
        if roster.empty:
            raise MissingInputError(f"no roster totals for {team_code}", team_code=team_code)
        if self.positions is not None:
            roster = attach_nominal_positions(roster, self.positions)
        return roster
