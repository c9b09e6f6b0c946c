"""Team-level inputs and per-team rating context."""

from dataclasses import dataclass, fields
from typing import Optional


REQUIRED_TEAM_FIELDS = (
    "team",
    "games",
    "minutes",
    "points",
    "fga",
    "fta",
    "pace",
    "ortg",
    "drtg",
    "trb",
    "stl",
    "blk",
    "ast",
    "pf",
)


@dataclass
class TeamSeasonTotals:
    """
    Season totals for a team.

    Counting stats are summed over games; ``pace`` and the ratings are per-game
    averages over the games that carried advanced stats.
    """

    team: str
    games: int = 0
    minutes: float = 0.0
    points: float = 0.0
    fga: float = 0.0
    fgm: float = 0.0
    fg3a: float = 0.0
    fg3m: float = 0.0
    fta: float = 0.0
    ftm: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    orb: float = 0.0
    drb: float = 0.0
    trb: float = 0.0
    tov: float = 0.0
    pf: float = 0.0
    pace: float = 0.0  # possessions per 48 minutes
    ortg: float = 0.0
    drtg: float = 0.0
    net_rating: Optional[float] = None

    def __post_init__(self):
        if self.net_rating is None or self.net_rating != self.net_rating:
            self.net_rating = self.ortg - self.drtg

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "TeamSeasonTotals":
        """Create from dictionary; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class TeamContext:
    """Team-level quantities that set the uniform per-player correction."""

    team: str
    league_ortg: float
    relative_ortg: float
    relative_drtg: float
    net_rating: float
    average_lead: float
    lead_bonus: float
    adjusted_net_rating: float
    adjusted_ortg: float
    raw_contribution: float  # sum of raw BPM * floor share
    raw_offensive_contribution: float
    correction: float
    offensive_correction: float

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
