"""Tests for the league-wide run."""

import numpy as np
import pandas as pd
import pytest

from bpm_engine import LeagueConfig, MissingInputError, compute_league
from bpm_engine.data.loader import DataLoader
from bpm_engine.data.providers import FrameTotalsProvider
from bpm_engine.errors import DataError


@pytest.fixture
def provider():
    players, teams = DataLoader.sample_league()
    return FrameTotalsProvider(players, teams)


def test_sample_league_end_to_end(provider):
    result = compute_league(None, provider)

    assert result.league_ortg == pytest.approx(110.0)
    assert sorted(result.teams) == ["AAA", "BBB"]
    assert result.failed_teams == {}
    assert len(result.table) == 10
    assert result.table["bpm"].is_monotonic_decreasing
    for code, expected in (("AAA", 5.4375), ("BBB", -5.4375)):
        players = result.table[result.table["team"] == code]
        assert players["contribution"].sum() == pytest.approx(expected)


def test_unknown_team_is_recorded_not_raised(provider):
    result = compute_league(["AAA", "CCC", "BBB"], provider)

    assert result.failed_team_codes == ["CCC"]
    assert "CCC" in result.failed_teams["CCC"]
    assert set(result.table["team"]) == {"AAA", "BBB"}
    # the failed team does not move the league average
    assert result.league_ortg == pytest.approx(110.0)


def test_invalid_roster_fails_only_that_team():
    players, teams = DataLoader.sample_league()
    players = players.astype({"ast": float})
    players.loc[players["player_id"] == "bbb_2", "ast"] = np.nan

    result = compute_league(None, FrameTotalsProvider(players, teams))

    assert list(result.teams) == ["AAA"]
    assert "ast" in result.failed_teams["BBB"]
    assert (result.table["team"] == "AAA").all()


def test_fail_fast_raises(provider):
    with pytest.raises(MissingInputError):
        compute_league(["AAA", "CCC"], provider, config=LeagueConfig(fail_fast=True))


def test_league_ortg_override(provider):
    result = compute_league(None, provider, config=LeagueConfig(league_ortg=100.0))

    assert result.league_ortg == 100.0
    assert result.teams["AAA"].context.relative_ortg == pytest.approx(12.5)


def test_nothing_rated_gives_empty_table(provider):
    result = compute_league(["CCC"], provider)

    assert result.table.empty
    assert "bpm" in result.table.columns
    assert result.league_ortg is None
    assert result.position_default_rate == 0.0


def test_parallel_matches_sequential(provider):
    sequential = compute_league(None, provider)
    parallel = compute_league(None, provider, config=LeagueConfig(parallel_workers=2))

    pd.testing.assert_frame_equal(sequential.table, parallel.table)


def test_position_lookup_and_default_rate():
    players, teams = DataLoader.sample_league()
    players = players.drop(columns=["position"])
    lookup = {
        "aaa_1": "PG",
        "aaa_2": {"SG": 80, "SF": 20},
        "aaa_3": 3.0,
        "aaa_4": "PF",
        "aaa_5": "C",
        "bbb_1": "Point Guard",
    }

    result = compute_league(None, FrameTotalsProvider(players, teams, positions=lookup))

    assert result.position_default_rate == pytest.approx(4 / 10)
    aaa = result.teams["AAA"].players.set_index("player_id")
    assert aaa.loc["aaa_2", "position"] == pytest.approx(2.2)
    assert not aaa["position_defaulted"].any()
    assert result.teams["BBB"].defaulted_positions == 4


def test_summary_is_serialisable(provider):
    summary = compute_league(["AAA", "CCC"], provider).summary()

    assert summary["teams_rated"] == 1
    assert summary["players_rated"] == 5
    assert list(summary["failed_teams"]) == ["CCC"]
    assert summary["diagnostics"] == []


def test_provider_requires_team_column():
    players, teams = DataLoader.sample_league()
    with pytest.raises(DataError):
        FrameTotalsProvider(players.drop(columns=["team"]), teams)


@pytest.mark.parametrize("bad_ortg", [np.nan, "n/a"])
def test_invalid_team_totals_do_not_leak_into_league_ortg(bad_ortg):
    players, teams = DataLoader.sample_league()
    extra = teams[teams["team"] == "AAA"].assign(team="CCC")
    teams = pd.concat([teams, extra], ignore_index=True).astype({"ortg": object})
    teams.loc[teams["team"] == "CCC", "ortg"] = bad_ortg
    players = pd.concat(
        [players, players[players["team"] == "AAA"].assign(team="CCC", player_id=lambda f: "c" + f["player_id"])],
        ignore_index=True,
    )

    result = compute_league(None, FrameTotalsProvider(players, teams))

    assert result.failed_team_codes == ["CCC"]
    assert "ortg" in result.failed_teams["CCC"]
    assert result.league_ortg == pytest.approx(110.0)
    for column in ("obpm", "dbpm", "regressed_obpm", "regressed_dbpm"):
        assert np.isfinite(result.table[column].astype(float)).all()
    assert set(result.table["team"]) == {"AAA", "BBB"}


def test_invalid_team_totals_raise_when_failing_fast():
    players, teams = DataLoader.sample_league()
    teams.loc[teams["team"] == "BBB", "ortg"] = np.nan

    with pytest.raises(MissingInputError, match="ortg"):
        compute_league(None, FrameTotalsProvider(players, teams), config=LeagueConfig(fail_fast=True))
