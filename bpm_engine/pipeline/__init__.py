"""Per-team and league-wide rating runs."""

from .league import LeagueConfig, LeagueResult, compute_league
from .team import TeamResult, compute_team

__all__ = ["LeagueConfig", "LeagueResult", "TeamResult", "compute_league", "compute_team"]
