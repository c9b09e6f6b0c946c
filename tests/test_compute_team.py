"""End-to-end tests for rating a single team."""

import numpy as np
import pandas as pd
import pytest

from bpm_engine import MissingInputError, compute_team
from bpm_engine.data.loader import DataLoader
from bpm_engine.models.player import PlayerSeasonTotals
from bpm_engine.models.team import TeamSeasonTotals


@pytest.fixture
def sample():
    players, teams = DataLoader.sample_league()
    return players, teams


def _inputs(sample, code):
    players, teams = sample
    team = teams[teams["team"] == code].iloc[0].to_dict()
    roster = players[players["team"] == code].reset_index(drop=True)
    return team, roster


def _bench_player(team_code):
    row = {k: 0.0 for k in ("minutes", "points", "fga", "fgm", "fg3a", "fg3m", "fta", "ftm",
                            "ast", "stl", "blk", "orb", "drb", "trb", "tov", "pf", "plus_minus")}
    row.update({"player_id": f"{team_code.lower()}_bench", "team": team_code, "games": 0, "position": 2.0})
    return row


class TestComputeTeam:
    def test_sample_team_rates_every_player(self, sample):
        team, roster = _inputs(sample, "AAA")
        result = compute_team("AAA", team, roster, league_ortg=110.0)

        assert result.team_code == "AAA"
        assert len(result.players) == 5
        assert list(result.players.columns[:5]) == ["player_id", "name", "team", "games", "minutes"]
        assert result.players["floor_share"].tolist() == pytest.approx([1.0] * 5)
        assert result.diagnostics == []

    def test_positions_average_three_and_stay_in_range(self, sample):
        team, roster = _inputs(sample, "AAA")
        players = compute_team("AAA", team, roster, league_ortg=110.0).players

        minutes = players["minutes"].to_numpy()
        for column in ("adj_position", "offensive_role"):
            assert players[column].between(1.0, 5.0).all()
            assert np.dot(players[column], minutes) / minutes.sum() == pytest.approx(3.0, abs=1e-6)
        # point guard line sits below the center line
        assert players["adj_position"].iloc[0] < players["adj_position"].iloc[4]

    def test_contributions_sum_to_adjusted_net_rating(self, sample):
        team, roster = _inputs(sample, "AAA")
        result = compute_team("AAA", team, roster, league_ortg=110.0)

        assert result.context.adjusted_net_rating == pytest.approx(5.4375)
        assert result.players["contribution"].sum() == pytest.approx(5.4375)
        np.testing.assert_allclose(result.players["dbpm"], result.players["bpm"] - result.players["obpm"])

    def test_identical_boxes_differ_only_by_team_correction(self, sample):
        good = compute_team("AAA", *_inputs(sample, "AAA"), league_ortg=110.0).players
        bad = compute_team("BBB", *_inputs(sample, "BBB"), league_ortg=110.0).players

        np.testing.assert_allclose(good["raw_bpm"], bad["raw_bpm"])
        np.testing.assert_allclose(good["bpm"] - bad["bpm"], [2.175] * 5)

    def test_deterministic_and_inputs_untouched(self, sample):
        team, roster = _inputs(sample, "AAA")
        team_before = dict(team)
        roster_before = roster.copy()

        first = compute_team("AAA", team, roster, league_ortg=110.0)
        second = compute_team("AAA", team, roster, league_ortg=110.0)

        pd.testing.assert_frame_equal(first.players, second.players)
        pd.testing.assert_frame_equal(roster, roster_before)
        assert team == team_before

    def test_league_ortg_defaults_to_team_ortg(self, sample):
        team, roster = _inputs(sample, "AAA")
        result = compute_team("AAA", team, roster)

        assert result.context.league_ortg == pytest.approx(112.5)
        assert result.context.relative_ortg == pytest.approx(0.0)

    def test_zero_minute_player_gets_team_correction(self, sample):
        team, roster = _inputs(sample, "AAA")
        roster = pd.concat([roster, pd.DataFrame([_bench_player("AAA")])], ignore_index=True)

        result = compute_team("AAA", team, roster, league_ortg=110.0)
        bench = result.players[result.players["player_id"] == "aaa_bench"].iloc[0]

        assert bench["raw_bpm"] == 0.0
        assert bench["bpm"] == result.context.correction
        assert bench["obpm"] == result.context.offensive_correction
        assert bench["contribution"] == 0.0
        assert bench["vorp"] == 0.0
        assert bench["regressed_bpm"] == 4.75
        assert bench["adj_position"] >= 1.0

    def test_accepts_dataclass_inputs(self, sample):
        team, roster = _inputs(sample, "BBB")
        from_frame = compute_team("BBB", team, roster, league_ortg=110.0)

        players = [PlayerSeasonTotals.from_dict(r) for r in roster.to_dict(orient="records")]
        from_records = compute_team("BBB", TeamSeasonTotals.from_dict(team), players, league_ortg=110.0)

        np.testing.assert_allclose(from_records.players["bpm"], from_frame.players["bpm"])
        np.testing.assert_allclose(from_records.players["vorp"], from_frame.players["vorp"])

    def test_missing_position_column_defaults_to_three(self, sample):
        team, roster = _inputs(sample, "AAA")
        result = compute_team("AAA", team, roster.drop(columns=["position"]), league_ortg=110.0)

        assert result.defaulted_positions == 5
        assert result.players["position"].tolist() == [3.0] * 5
        assert result.to_dict()["defaulted_positions"] == 5


class TestComputeTeamErrors:
    def test_missing_team_totals(self, sample):
        _, roster = _inputs(sample, "AAA")
        with pytest.raises(MissingInputError) as exc:
            compute_team("AAA", None, roster)
        assert exc.value.team_code == "AAA"

    def test_missing_roster(self, sample):
        team, _ = _inputs(sample, "AAA")
        with pytest.raises(MissingInputError):
            compute_team("AAA", team, None)

    def test_missing_player_field(self, sample):
        team, roster = _inputs(sample, "AAA")
        with pytest.raises(MissingInputError) as exc:
            compute_team("AAA", team, roster.drop(columns=["ast"]))
        assert "ast" in exc.value.problems[0]

    def test_nan_player_field(self, sample):
        team, roster = _inputs(sample, "AAA")
        roster = roster.astype({"stl": float})
        roster.loc[2, "stl"] = np.nan
        with pytest.raises(MissingInputError, match="stl"):
            compute_team("AAA", team, roster)

    def test_team_totals_missing_pace(self, sample):
        team, roster = _inputs(sample, "AAA")
        del team["pace"]
        with pytest.raises(MissingInputError, match="pace"):
            compute_team("AAA", team, roster)


class TestPlayerSeasonTotals:
    def test_rejects_negative_minutes(self):
        with pytest.raises(ValueError):
            PlayerSeasonTotals(player_id="x", team="AAA", minutes=-1.0)

    def test_rejects_makes_over_attempts(self):
        with pytest.raises(ValueError):
            PlayerSeasonTotals(player_id="x", team="AAA", fga=3.0, fgm=4.0)

    def test_from_dict_ignores_unknown_keys(self):
        player = PlayerSeasonTotals.from_dict({"player_id": "x", "team": "AAA", "minutes": 96, "games": 4, "foo": 1})
        assert player.minutes_per_game == 24.0
        assert player.position is None
