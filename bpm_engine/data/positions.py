"""Nominal position values from positional labels and time-share tables."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

ROLE_VALUES = {"PG": 1.0, "SG": 2.0, "SF": 3.0, "PF": 4.0, "C": 5.0}

_LABEL_ALIASES = {
    "POINT GUARD": "PG",
    "SHOOTING GUARD": "SG",
    "SMALL FORWARD": "SF",
    "POWER FORWARD": "PF",
    "CENTER": "C",
    "GUARD": "G",
    "FORWARD": "F",
}

# Generic labels sit between the two roles they cover.
_GENERIC_VALUES = {"G": 1.5, "F": 3.5}

DEFAULT_NOMINAL_POSITION = 3.0


def position_from_time_share(shares: Mapping[str, float]) -> Optional[float]:
    """
    Weighted position from a role -> share mapping.

    Shares may be fractions or percentages; only their ratios matter. Returns
    ``None`` when nothing recognisable was played.

        >>> position_from_time_share({"PG": 60, "SG": 40})
        1.4
    """
    total = 0.0
    weighted = 0.0
    for role, share in (shares or {}).items():
        value = ROLE_VALUES.get(str(role).strip().upper())
        if value is None:
            logger.debug("Ignoring unknown role %r in time share", role)
            continue
        try:
            share = float(share)
        except (TypeError, ValueError):
            continue
        if share != share or share <= 0:
            continue
        total += share
        weighted += value * share
    if total <= 0:
        return None
    return weighted / total


def position_from_label(label: Optional[str]) -> Optional[float]:
    """Map a roster label ("PG", "G-F", "Center") to a 1..5 value."""
    raw = (label or "").strip().upper()
    if not raw:
        return None
    raw = _LABEL_ALIASES.get(raw, raw)
    parts = [p.strip() for p in raw.replace("/", "-").split("-") if p.strip()]
    values = []
    for part in parts:
        part = _LABEL_ALIASES.get(part, part)
        if part in ROLE_VALUES:
            values.append(ROLE_VALUES[part])
        elif part in _GENERIC_VALUES:
            values.append(_GENERIC_VALUES[part])
    if not values:
        return None
    return float(np.mean(values))


def _resolve(entry: Union[float, str, Mapping, None]) -> Optional[float]:
    if entry is None:
        return None
    if isinstance(entry, Mapping):
        return position_from_time_share(entry)
    if isinstance(entry, str):
        return position_from_label(entry)
    try:
        value = float(entry)
    except (TypeError, ValueError):
        return None
    if value != value:
        return None
    return float(np.clip(value, 1.0, 5.0))


def attach_nominal_positions(
    players: pd.DataFrame,
    lookup: Mapping[str, Union[float, str, Mapping]],
    default: float = DEFAULT_NOMINAL_POSITION,
) -> pd.DataFrame:
    """
    Fill ``position`` from a lookup keyed by resolved player id.

    Lookup values may be a numeric value, a roster label or a time-share
    mapping. Unresolved players get ``default`` and ``position_defaulted=True``.
    """
    out = players.copy()
    resolved = [_resolve(lookup.get(str(pid))) for pid in out["player_id"]]
    out["position_defaulted"] = [value is None for value in resolved]
    out["position"] = [default if value is None else value for value in resolved]

    rate = default_position_rate(out)
    if rate > 0:
        logger.info("Nominal position defaulted to %.1f for %.1f%% of players", default, 100.0 * rate)
    return out


def default_position_rate(frame: pd.DataFrame) -> float:
    """Fraction of rows whose nominal position fell back to the default."""
    if len(frame) == 0 or "position_defaulted" not in frame.columns:
        return 0.0
    return float(frame["position_defaulted"].astype(bool).mean())
