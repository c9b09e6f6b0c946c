"""Schema validators for season-total inputs."""

from __future__ import annotations

from typing import List, Mapping, Optional

import pandas as pd

from ..models.player import REQUIRED_PLAYER_FIELDS
from ..models.team import REQUIRED_TEAM_FIELDS


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if out != out:  # NaN
        return None
    return out


def validate_team_totals(payload: Mapping) -> List[str]:
    errors: List[str] = []
    if not isinstance(payload, Mapping):
        return ["team totals must be an object"]

    missing = [k for k in REQUIRED_TEAM_FIELDS if k not in payload or payload.get(k) is None]
    if missing:
        errors.append(f"team totals missing fields: {', '.join(missing)}")

    for key in REQUIRED_TEAM_FIELDS:
        if key == "team" or key in missing:
            continue
        if _to_float(payload.get(key)) is None:
            errors.append(f"team totals field '{key}' is not numeric")

    minutes = _to_float(payload.get("minutes"))
    if minutes is not None and minutes < 0:
        errors.append(f"team minutes must be non-negative; got {minutes}")
    return errors


def validate_roster_frame(frame: pd.DataFrame, team_code: str = "") -> List[str]:
    errors: List[str] = []
    label = f"roster '{team_code}'" if team_code else "roster"
    if frame is None or len(frame) == 0:
        return [f"{label} has no players"]

    missing_cols = [k for k in REQUIRED_PLAYER_FIELDS if k not in frame.columns]
    if missing_cols:
        return [f"{label} missing fields: {', '.join(missing_cols)}"]

    for key in REQUIRED_PLAYER_FIELDS:
        nulls = frame[key].isna()
        if nulls.any():
            ids = ", ".join(str(p) for p in frame.loc[nulls, "player_id"].head(5))
            errors.append(f"{label} field '{key}' missing for players: {ids}")

    numeric = [k for k in REQUIRED_PLAYER_FIELDS if k != "player_id"]
    bad = [k for k in numeric if not pd.api.types.is_numeric_dtype(frame[k])]
    if bad:
        errors.append(f"{label} non-numeric fields: {', '.join(bad)}")
        return errors

    negative = frame["minutes"] < 0
    if negative.any():
        ids = ", ".join(str(p) for p in frame.loc[negative, "player_id"].head(5))
        errors.append(f"{label} negative minutes for players: {ids}")

    for made, attempted in (("fgm", "fga"), ("fg3m", "fg3a"), ("ftm", "fta")):
        over = frame[made] > frame[attempted]
        if over.any():
            ids = ", ".join(str(p) for p in frame.loc[over, "player_id"].head(5))
            errors.append(f"{label} {made} exceeds {attempted} for players: {ids}")

    dupes = frame["player_id"].duplicated()
    if dupes.any():
        ids = ", ".join(str(p) for p in frame.loc[dupes, "player_id"].head(5))
        errors.append(f"{label} duplicate player ids: {ids}")

    if "position" in frame.columns:
        pos = pd.to_numeric(frame["position"], errors="coerce")
        outside = pos.notna() & ((pos < 1.0) | (pos > 5.0))
        if outside.any():
            ids = ", ".join(str(p) for p in frame.loc[outside, "player_id"].head(5))
            errors.append(f"{label} nominal position outside [1, 5] for players: {ids}")
    return errors
