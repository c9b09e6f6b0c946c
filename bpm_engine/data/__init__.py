"""Input loading, validation and season aggregation."""

from .aggregate import aggregate_player_games, aggregate_team_games
from .loader import DataLoader
from .positions import attach_nominal_positions, position_from_label, position_from_time_share
from .providers import FrameTotalsProvider, TotalsProvider
from .validators import validate_roster_frame, validate_team_totals

__all__ = [
    "DataLoader",
    "FrameTotalsProvider",
    "TotalsProvider",
    "aggregate_player_games",
    "aggregate_team_games",
    "attach_nominal_positions",
    "position_from_label",
    "position_from_time_share",
    "validate_roster_frame",
    "validate_team_totals",
]
