"""Raw (pre team adjustment) BPM and OBPM from per-100 rates."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .constants import CATEGORY_GROUPS, DEFAULT_COEFFICIENTS, CoefficientSet, CoefficientTable


def positional_constant(position, offensive_role, table: CoefficientTable) -> np.ndarray:
    """
    Below position 3 the constant is ``(3 - p) / 2 * K_low``; otherwise it is
    ``K_high * (offensive_role - 3)``.
    """
    p = np.asarray(position, dtype=float)
    role = np.asarray(offensive_role, dtype=float)
    return np.where(
        p < 3.0,
        (3.0 - p) / 2.0 * table.position_constant_low,
        table.role_constant_high * (role - 3.0),
    )


def _raw_components(frame: pd.DataFrame, prefix: str) -> dict:
    groups = {}
    for group, categories in CATEGORY_GROUPS.items():
        total = np.zeros(len(frame), dtype=float)
        for category in categories:
            total = total + frame[f"{prefix}_{category}"].to_numpy(dtype=float) * frame[f"{category}_100"].to_numpy(
                dtype=float
            )
        groups[group] = total
    return groups


def compute_raw_ratings(frame: pd.DataFrame, coefficients: CoefficientSet = DEFAULT_COEFFICIENTS) -> pd.DataFrame:
    """
    Add raw overall and offensive ratings to a copy of ``frame``.

    Group components are stored as ``raw_<group>`` / ``raw_off_<group>``. A
    player without minutes has no rates and gets a raw rating of 0, the
    positional constant included, so the final rating is the team correction alone.
    """
    out = frame.copy()
    played = out["minutes"].to_numpy(dtype=float) > 0
    position = out["adj_position"].to_numpy(dtype=float)
    role = out["offensive_role"].to_numpy(dtype=float)

    for prefix, label, table in (
        ("coef", "raw", coefficients.overall),
        ("ocoef", "raw_off", coefficients.offensive),
    ):
        groups = _raw_components(out, prefix)
        for group, values in groups.items():
            out[f"{label}_{group}"] = values
        constant = np.where(played, positional_constant(position, role, table), 0.0)
        out[f"{label}_constant"] = constant
        out[f"{label}_bpm"] = sum(groups.values()) + constant
    return out
