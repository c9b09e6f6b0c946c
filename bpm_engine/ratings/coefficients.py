"""Interpolate category weights along the 1..5 position axis."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .constants import CATEGORIES, DEFAULT_COEFFICIENTS, OFFENSIVE_ROLE_CATEGORIES, CoefficientSet, CoefficientTable


def interpolate(position, pos1: float, pos5: float):
    """``(5 - p) / 4 * pos1 + (p - 1) / 4 * pos5``; exact at p = 1 and p = 5."""
    p = np.asarray(position, dtype=float)
    out = (5.0 - p) / 4.0 * pos1 + (p - 1.0) / 4.0 * pos5
    if out.ndim == 0:
        return float(out)
    return out


def interpolate_table(table: CoefficientTable, position, offensive_role) -> dict:
    """Per-category coefficients for one flavor; FGA and FTA use the offensive role."""
    coefs = {}
    for category in CATEGORIES:
        pos1, pos5 = table.weights(category)
        axis = offensive_role if category in OFFENSIVE_ROLE_CATEGORIES else position
        coefs[category] = interpolate(axis, pos1, pos5)
    return coefs


def attach_coefficients(frame: pd.DataFrame, coefficients: CoefficientSet = DEFAULT_COEFFICIENTS) -> pd.DataFrame:
    """Add ``coef_<category>`` (overall) and ``ocoef_<category>`` (offensive) columns."""
    out = frame.copy()
    position = out["adj_position"].to_numpy(dtype=float)
    role = out["offensive_role"].to_numpy(dtype=float)
    for prefix, table in (("coef", coefficients.overall), ("ocoef", coefficients.offensive)):
        for category, values in interpolate_table(table, position, role).items():
            out[f"{prefix}_{category}"] = values
    return out
