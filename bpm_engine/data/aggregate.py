"""Collapse per-game box-score rows into season totals."""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from ..errors import MissingInputError

logger = logging.getLogger(__name__)

COUNTING_STATS = (
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

ADVANCED_STATS = ("pace", "ortg", "drtg")


def _fill_rebounds(frame: pd.DataFrame) -> pd.DataFrame:
    if "trb" not in frame.columns and {"orb", "drb"} <= set(frame.columns):
        frame = frame.assign(trb=frame["orb"] + frame["drb"])
    return frame


def _complete_games(games: pd.DataFrame) -> pd.DataFrame:
    complete = games.dropna(subset=list(ADVANCED_STATS))
    dropped = len(games) - len(complete)
    if dropped:
        logger.warning("Dropped %d team game rows without advanced stats", dropped)
    return complete


def _restrict_to_team_games(games: pd.DataFrame, team_games: pd.DataFrame) -> pd.DataFrame:
    if "game_id" not in games.columns or "game_id" not in team_games.columns:
        raise MissingInputError(
            "player and team game rows need a 'game_id' column to align", problems=["game_id"]
        )
    kept = _complete_games(team_games)[["team", "game_id"]].drop_duplicates()
    out = games.merge(kept, on=["team", "game_id"], how="inner")
    if len(out) < len(games):
        logger.info("Dropped %d player game rows outside the rated team games", len(games) - len(out))
    return out


def aggregate_player_games(games: pd.DataFrame, team_games: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """
    Sum per-game player rows into one row per (player_id, team) stint.

    ``games`` counts the rows in the stint; ``plus_minus`` is summed when
    present and ``name`` keeps the first spelling seen.

    When ``team_games`` is given, only player rows whose ``(team, game_id)``
    survives :func:`aggregate_team_games` are summed, so player minutes and
    team minutes cover the same games and floor shares add up to 5.
    """
    if games is None or games.empty:
        return pd.DataFrame(columns=["player_id", "team", "games", *COUNTING_STATS])

    games = _fill_rebounds(games)
    missing = [c for c in ("player_id", "team", *COUNTING_STATS) if c not in games.columns]
    if missing:
        raise MissingInputError(f"player game rows missing fields: {', '.join(missing)}", problems=missing)
    if team_games is not None:
        games = _restrict_to_team_games(games, team_games)

    sums = [c for c in (*COUNTING_STATS, "plus_minus") if c in games.columns]
    grouped = games.groupby(["player_id", "team"], sort=True)
    out = grouped[sums].sum()
    out.insert(0, "games", grouped.size())
    if "name" in games.columns:
        out.insert(0, "name", grouped["name"].first())
    return out.reset_index()


def aggregate_team_games(games: pd.DataFrame) -> pd.DataFrame:
    """
    Sum per-game team rows into season totals.

    Rows without pace or ratings are dropped before anything is summed, so the
    counting totals and the averaged advanced stats cover the same games.
    """
    if games is None or games.empty:
        return pd.DataFrame(columns=["team", "games", *COUNTING_STATS, *ADVANCED_STATS, "net_rating"])

    games = _fill_rebounds(games)
    missing = [c for c in ("team", *COUNTING_STATS, *ADVANCED_STATS) if c not in games.columns]
    if missing:
        raise MissingInputError(f"team game rows missing fields: {', '.join(missing)}", problems=missing)

    complete = _complete_games(games)

    grouped = complete.groupby("team", sort=True)
    out = grouped[list(COUNTING_STATS)].sum()
    out = out.join(grouped[list(ADVANCED_STATS)].mean())
    out.insert(0, "games", grouped.size())
    if "net_rating" in complete.columns and complete["net_rating"].notna().all():
        out["net_rating"] = grouped["net_rating"].mean()
    else:
        out["net_rating"] = out["ortg"] - out["drtg"]
    return out.reset_index()
