"""Load and save season totals and rating tables."""

import json
from pathlib import Path
from typing import Dict, Tuple, Union

import pandas as pd

from ..errors import DataError
from ..models.team import TeamSeasonTotals
from .aggregate import ADVANCED_STATS, COUNTING_STATS

PathLike = Union[str, Path]

_NUMERIC_COLUMNS = ("games", *COUNTING_STATS, *ADVANCED_STATS, "net_rating", "plus_minus", "position")

# Season lines for the sample league: one player per position, each on the floor every minute.
_SAMPLE_LINES = [
    # position, points, fga, fgm, fg3a, fg3m, fta, ftm, ast, stl, blk, orb, drb, tov, pf
    (1, 1635, 1312, 590, 492, 180, 328, 275, 574, 107, 16, 41, 287, 230, 164),
    (2, 1509, 1230, 541, 533, 197, 287, 230, 287, 90, 25, 49, 287, 148, 180),
    (3, 1312, 1066, 476, 369, 131, 287, 229, 230, 82, 41, 82, 410, 131, 197),
    (4, 1114, 902, 426, 164, 57, 271, 205, 164, 66, 66, 164, 574, 115, 230),
    (5, 1037, 779, 410, 16, 4, 328, 213, 148, 57, 100, 246, 656, 123, 246),
]


class DataLoader:
    """Loads season totals from CSV / JSON files."""

    @staticmethod
    def load_frame(file_path: PathLike) -> pd.DataFrame:
        """
        Load a table from CSV or JSON.

        JSON may be a list of records or an object holding one under
        ``players``, ``teams`` or ``rows``.
        """
        path = Path(file_path)
        if path.suffix.lower() == ".csv":
            return pd.read_csv(path)

        with open(path, "r") as f:
            data = json.load(f)
        if isinstance(data, dict):
            for key in ("players", "teams", "rows"):
                if isinstance(data.get(key), list):
                    data = data[key]
                    break
            else:
                raise DataError(f"{path} holds no 'players', 'teams' or 'rows' list")
        if not isinstance(data, list):
            raise DataError(f"{path} must hold a list of records")
        return pd.DataFrame.from_records(data)

    @staticmethod
    def _coerce(frame: pd.DataFrame) -> pd.DataFrame:
        frame = frame.copy()
        for col in _NUMERIC_COLUMNS:
            if col in frame.columns:
                frame[col] = pd.to_numeric(frame[col], errors="coerce")
        for col in ("player_id", "team"):
            if col in frame.columns:
                frame[col] = frame[col].astype(str).str.strip()
        return frame

    @staticmethod
    def load_player_totals(file_path: PathLike) -> pd.DataFrame:
        """Load player season totals; unparseable numbers become NaN for validation to catch."""
        return DataLoader._coerce(DataLoader.load_frame(file_path))

    @staticmethod
    def load_team_totals(file_path: PathLike) -> pd.DataFrame:
        frame = DataLoader._coerce(DataLoader.load_frame(file_path))
        if "net_rating" not in frame.columns and {"ortg", "drtg"} <= set(frame.columns):
            frame["net_rating"] = frame["ortg"] - frame["drtg"]
        return frame

    @staticmethod
    def load_positions(file_path: PathLike) -> Dict[str, object]:
        """
        Load a player id -> nominal position lookup.

        JSON objects map ids to a value, label or time-share mapping; CSV files
        need ``player_id`` and ``position`` columns.
        """
        path = Path(file_path)
        if path.suffix.lower() == ".csv":
            frame = pd.read_csv(path)
            if not {"player_id", "position"} <= set(frame.columns):
                raise DataError(f"{path} needs 'player_id' and 'position' columns")
            return {str(pid): pos for pid, pos in zip(frame["player_id"], frame["position"])}

        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise DataError(f"{path} must hold an object of player id -> position")
        return {str(k): v for k, v in data.items()}

    @staticmethod
    def teams_from_frame(frame: pd.DataFrame) -> Dict[str, TeamSeasonTotals]:
        teams = {}
        for row in frame.to_dict(orient="records"):
            team = TeamSeasonTotals.from_dict(row)
            if team.team in teams:
                raise DataError(f"duplicate team totals for {team.team}")
            teams[team.team] = team
        return teams

    @staticmethod
    def save_table(frame: pd.DataFrame, file_path: PathLike) -> None:
        """Save a rating table as CSV or JSON records, by extension."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() == ".json":
            with open(path, "w") as f:
                json.dump({"players": json.loads(frame.to_json(orient="records"))}, f, indent=2)
        else:
            frame.to_csv(path, index=False)

    @staticmethod
    def sample_league() -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Two-team sample league with identical box totals.

        Team AAA is +5 per 100 and BBB is -5, both at pace 100 over 82 games.
        """
        games = 82
        player_minutes = games * 48.0
        players = []
        teams = []
        for team, ortg, drtg in (("AAA", 112.5, 107.5), ("BBB", 107.5, 112.5)):
            roster = []
            for line in _SAMPLE_LINES:
                pos, pts, fga, fgm, fg3a, fg3m, fta, ftm, ast, stl, blk, orb, drb, tov, pf = line
                roster.append(
                    {
                        "player_id": f"{team.lower()}_{pos}",
                        "team": team,
                        "games": games,
                        "minutes": player_minutes,
                        "points": pts,
                        "fga": fga,
                        "fgm": fgm,
                        "fg3a": fg3a,
                        "fg3m": fg3m,
                        "fta": fta,
                        "ftm": ftm,
                        "ast": ast,
                        "stl": stl,
                        "blk": blk,
                        "orb": orb,
                        "drb": drb,
                        "trb": orb + drb,
                        "tov": tov,
                        "pf": pf,
                        "plus_minus": (ortg - drtg) * games,
                        "position": float(pos),
                    }
                )
            players.extend(roster)

            totals = {k: sum(p[k] for p in roster) for k in COUNTING_STATS}
            totals.update({"team": team, "games": games, "pace": 100.0, "ortg": ortg, "drtg": drtg})
            totals["net_rating"] = ortg - drtg
            teams.append(totals)
        return pd.DataFrame(players), pd.DataFrame(teams)

    @staticmethod
    def create_sample_data(output_dir: PathLike) -> Tuple[Path, Path]:
        """
        Write the sample league as ``players.csv`` and ``teams.csv``.

        Returns:
            (players_path, teams_path)
        """
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        players, teams = DataLoader.sample_league()
        players_path = out / "players.csv"
        teams_path = out / "teams.csv"
        players.to_csv(players_path, index=False)
        teams.to_csv(teams_path, index=False)
        return players_path, teams_path
