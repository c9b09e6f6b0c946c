"""Input records and per-team context."""

from .player import REQUIRED_PLAYER_FIELDS, PlayerSeasonTotals
from .team import REQUIRED_TEAM_FIELDS, TeamContext, TeamSeasonTotals

__all__ = [
    "REQUIRED_PLAYER_FIELDS",
    "REQUIRED_TEAM_FIELDS",
    "PlayerSeasonTotals",
    "TeamContext",
    "TeamSeasonTotals",
]
