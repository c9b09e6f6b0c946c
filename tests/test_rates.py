"""Unit tests for rate normalization."""

import numpy as np
import pandas as pd
import pytest

from bpm_engine.models.team import TeamSeasonTotals
from bpm_engine.ratings.rates import normalize_rates, safe_divide


def _player(player_id, minutes, **stats):
    row = {
        "player_id": player_id,
        "games": 10,
        "minutes": minutes,
        "points": 0.0,
        "fga": 0.0,
        "fta": 0.0,
        "fg3m": 0.0,
        "ast": 0.0,
        "tov": 0.0,
        "orb": 0.0,
        "drb": 0.0,
        "trb": 0.0,
        "stl": 0.0,
        "blk": 0.0,
        "pf": 0.0,
    }
    row.update(stats)
    return row


@pytest.fixture
def team():
    # 100 FGA + 0.44 * 50 FTA = 122 TSA, 122 points -> exactly 1.0 points per TSA
    return TeamSeasonTotals(
        team="TST",
        games=10,
        minutes=240.0,
        points=122.0,
        fga=100.0,
        fta=50.0,
        trb=40.0,
        stl=0.0,
        blk=10.0,
        ast=20.0,
        pf=16.0,
        pace=96.0,
        ortg=110.0,
        drtg=108.0,
    )


def test_safe_divide_zero_and_nan_denominators():
    out = safe_divide([1.0, 2.0, 3.0], [2.0, 0.0, np.nan])
    assert out.tolist() == [0.5, 0.0, 0.0]
    assert safe_divide(5.0, 0.0) == 0.0


def test_adjusted_points_and_per_100(team):
    roster = pd.DataFrame([_player("a", 24.0, points=18.0, fga=10.0, fta=5.0, trb=8.0)])
    frame = normalize_rates(team, roster)

    row = frame.iloc[0]
    assert row["tsa"] == pytest.approx(12.2)
    # team baseline is exactly 1.0 points per TSA, so adjusted points equal points
    assert row["adj_pts"] == pytest.approx(18.0)
    assert row["possessions"] == pytest.approx(48.0)
    assert row["adj_pts_100"] == pytest.approx(37.5)
    assert row["fga_100"] == pytest.approx(10.0 / 48.0 * 100.0)
    assert row["ts_pct"] == pytest.approx(18.0 / 24.4)


def test_floor_share_and_team_shares(team):
    roster = pd.DataFrame([_player("a", 24.0, trb=8.0, blk=5.0, ast=2.0)])
    frame = normalize_rates(team, roster)

    row = frame.iloc[0]
    assert row["floor_share"] == pytest.approx(0.5)
    assert row["trb_share"] == pytest.approx((8.0 / 40.0) / 0.5)
    assert row["blk_share"] == pytest.approx((5.0 / 10.0) / 0.5)
    assert row["ast_share"] == pytest.approx((2.0 / 20.0) / 0.5)
    # team has no steals at all
    assert row["stl_share"] == 0.0


def test_zero_minute_player_gets_zero_rates(team):
    roster = pd.DataFrame([_player("bench", 0.0, points=0.0), _player("a", 24.0, points=10.0, fga=8.0)])
    frame = normalize_rates(team, roster)

    bench = frame.iloc[0]
    rate_cols = [c for c in frame.columns if c.endswith("_100") or c.endswith("_share")]
    assert rate_cols
    for col in rate_cols:
        assert bench[col] == 0.0
    assert bench["floor_share"] == 0.0
    assert bench["possessions"] == 0.0


def test_threshold_points_share_against_team(team):
    roster = pd.DataFrame([_player("a", 48.0, points=30.0, fga=20.0, fta=0.0)])
    frame = normalize_rates(team, roster)

    row = frame.iloc[0]
    # threshold efficiency = team 1.0 - 0.33 per TSA
    assert row["thresh_pts"] == pytest.approx(20.0 * (1.5 - 0.67))
    team_thresh = 122.0 * 0.33
    assert row["thresh_pts_share"] == pytest.approx(row["thresh_pts"] / team_thresh / 1.0)


def test_degenerate_team_totals_do_not_raise():
    empty = TeamSeasonTotals(team="NUL")
    roster = pd.DataFrame([_player("a", 10.0, points=4.0, fga=3.0)])
    frame = normalize_rates(empty, roster)

    row = frame.iloc[0]
    assert row["floor_share"] == 0.0
    assert row["possessions"] == 0.0
    assert row["adj_pts_100"] == 0.0


def test_input_frame_not_modified(team):
    roster = pd.DataFrame([_player("a", 24.0, points=18.0, fga=10.0)])
    before = roster.copy()
    normalize_rates(team, roster)
    pd.testing.assert_frame_equal(roster, before)
