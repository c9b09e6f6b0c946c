"""Player season totals as delivered by the ingestion layer."""

from dataclasses import dataclass, fields
from typing import Optional


# Columns every roster row must carry before a team can be rated.
REQUIRED_PLAYER_FIELDS = (
    "player_id",
    "games",
    "minutes",
    "points",
    "fga",
    "fgm",
    "fg3a",
    "fg3m",
    "fta",
    "ftm",
    "ast",
    "stl",
    "blk",
    "orb",
    "drb",
    "trb",
    "tov",
    "pf",
)


@dataclass
class PlayerSeasonTotals:
    """
    Season-aggregate box score for one player on one team.

    A player traded mid-season has one record per team stint. ``position`` is
    the nominal 1..5 value derived from positional time share; ``None`` means
    the lookup did not resolve and the model default (3.0) is used.
    """

    player_id: str
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
    plus_minus: float = 0.0
    position: Optional[float] = None
    name: str = ""

    def __post_init__(self):
        if self.minutes < 0:
            raise ValueError(f"Minutes must be non-negative, got {self.minutes} for {self.player_id}")
        for made, attempted in (("fgm", "fga"), ("fg3m", "fg3a"), ("ftm", "fta")):
            if getattr(self, made) > getattr(self, attempted):
                raise ValueError(
                    f"{self.player_id}: {made} ({getattr(self, made)}) exceeds {attempted} ({getattr(self, attempted)})"
                )
        if self.position is not None and not 1.0 <= self.position <= 5.0:
            raise ValueError(f"Position must be between 1 and 5, got {self.position}")

    @property
    def minutes_per_game(self) -> float:
        return self.minutes / self.games if self.games else 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerSeasonTotals":
        """Create from dictionary; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if kwargs.get("position") is not None:
            kwargs["position"] = float(kwargs["position"])
        return cls(**kwargs)
