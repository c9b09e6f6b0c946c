"""
League-wide BPM run.

Inputs for every team are materialised and validated first, and the league
average offensive rating is computed once from the teams that passed.
Teams are then rated independently, sequentially or across
ProcessPoolExecutor workers, and merged by concatenation. A team that fails
is recorded and skipped unless the run is configured to fail fast.
"""

from __future__ import annotations

import logging
import multiprocessing
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from ..data.providers import TotalsProvider
from ..errors import ConvergenceAssumptionViolation, DataError
from ..models.team import TeamSeasonTotals
from ..ratings.constants import DEFAULT_COEFFICIENTS, DEFAULT_CONSTANTS, CoefficientSet, ModelConstants
from ..ratings.team_adjustment import league_offensive_rating
from .team import SUMMARY_COLUMNS, TeamResult, compute_team, resolve_team_totals

logger = logging.getLogger(__name__)

# Per-team errors isolated in partial runs. DataError is a ValueError.
TEAM_ERRORS = (ValueError, TypeError, KeyError, ZeroDivisionError)


@dataclass
class LeagueConfig:
    """Run-level knobs for :func:`compute_league`."""

    parallel_workers: Optional[int] = 1  # None = all CPUs but one
    fail_fast: bool = False
    league_ortg: Optional[float] = None  # override the mean of team ORtgs

    def __post_init__(self):
        if self.parallel_workers is None:
            self.parallel_workers = max(1, multiprocessing.cpu_count() - 1)
        self.parallel_workers = max(1, int(self.parallel_workers))


@dataclass
class LeagueResult:
    """Concatenated league table plus per-team results and failures."""

    table: pd.DataFrame
    teams: Dict[str, TeamResult] = field(default_factory=dict)
    failed_teams: Dict[str, str] = field(default_factory=dict)
    league_ortg: Optional[float] = None

    @property
    def failed_team_codes(self) -> List[str]:
        return list(self.failed_teams)

    @property
    def diagnostics(self) -> List[ConvergenceAssumptionViolation]:
        return [d for result in self.teams.values() for d in result.diagnostics]

    @property
    def position_default_rate(self) -> float:
        """Share of rated players whose nominal position fell back to the default."""
        if self.table.empty:
            return 0.0
        return float(self.table["position_defaulted"].astype(bool).mean())

    def summary(self) -> dict:
        return {
            "teams_rated": len(self.teams),
            "players_rated": int(len(self.table)),
            "league_ortg": self.league_ortg,
            "failed_teams": dict(self.failed_teams),
            "position_default_rate": self.position_default_rate,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def _failure_message(exc: Exception) -> str:
    if isinstance(exc, DataError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


def _materialize(
    team_codes: Iterable[str],
    provider: TotalsProvider,
    config: LeagueConfig,
    failed: Dict[str, str],
) -> Dict[str, Tuple[TeamSeasonTotals, pd.DataFrame]]:
    inputs = {}
    for code in team_codes:
        try:
            # invalid totals must not reach the league ORtg mean
            team = resolve_team_totals(code, provider.team_totals(code))
            inputs[code] = (team, provider.roster_totals(code))
        except TEAM_ERRORS as exc:
            if config.fail_fast:
                raise
            failed[code] = _failure_message(exc)
            logger.warning("Skipping %s: %s", code, failed[code])
    return inputs


def _record(
    code: str,
    run: Callable[[], TeamResult],
    results: Dict[str, TeamResult],
    failed: Dict[str, str],
    fail_fast: bool,
) -> None:
    try:
        results[code] = run()
    except TEAM_ERRORS as exc:
        if fail_fast:
            raise
        failed[code] = _failure_message(exc)
        logger.warning("Team %s failed: %s", code, failed[code])


def _run_sequential(inputs, coefficients, constants, league_ortg, fail_fast):
    results: Dict[str, TeamResult] = {}
    failed: Dict[str, str] = {}
    for code, (team, roster) in inputs.items():
        run = partial(compute_team, code, team, roster, coefficients, constants, league_ortg)
        _record(code, run, results, failed, fail_fast)
    return results, failed


def _run_parallel(inputs, coefficients, constants, league_ortg, fail_fast, workers):
    results: Dict[str, TeamResult] = {}
    failed: Dict[str, str] = {}
    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(compute_team, code, team, roster, coefficients, constants, league_ortg): code
            for code, (team, roster) in inputs.items()
        }
        for future in as_completed(futures):
            _record(futures[future], future.result, results, failed, fail_fast)
    return results, failed


def compute_league(
    team_codes: Optional[Iterable[str]],
    totals_provider: TotalsProvider,
    coefficients: CoefficientSet = DEFAULT_COEFFICIENTS,
    constants: ModelConstants = DEFAULT_CONSTANTS,
    config: Optional[LeagueConfig] = None,
) -> LeagueResult:
    """
    Rate every team and concatenate the players, best BPM first.

    Args:
        team_codes: Teams to rate; every team the provider knows when None
        totals_provider: Source of team and roster totals
        coefficients: Position-1 / position-5 weight tables
        constants: Model constants
        config: Run configuration

    Returns:
        LeagueResult; teams whose inputs were missing or invalid are listed in
        ``failed_teams`` instead of the table

    Raises:
        DataError: only when ``config.fail_fast`` is set
    """
    config = config or LeagueConfig()
    codes = list(team_codes) if team_codes is not None else totals_provider.team_codes()
    failed: Dict[str, str] = {}

    inputs = _materialize(codes, totals_provider, config, failed)

    if config.league_ortg is not None:
        league_ortg = float(config.league_ortg)
    elif inputs:
        league_ortg = league_offensive_rating(team for team, _ in inputs.values())
    else:
        league_ortg = None

    args = (inputs, coefficients, constants, league_ortg, config.fail_fast)
    if config.parallel_workers > 1 and len(inputs) > 1:
        try:
            results, run_failed = _run_parallel(*args, config.parallel_workers)
        except (RuntimeError, OSError) as exc:
            # Fall back to sequential if worker processes are unavailable
            logger.warning("Parallel run failed (%s); rating teams sequentially", exc)
            results, run_failed = _run_sequential(*args)
    else:
        results, run_failed = _run_sequential(*args)
    failed.update(run_failed)

    ordered = [results[code] for code in codes if code in results]
    if ordered:
        table = pd.concat([r.players for r in ordered], ignore_index=True)
        table = table.sort_values("bpm", ascending=False, kind="mergesort").reset_index(drop=True)
    else:
        table = pd.DataFrame(columns=SUMMARY_COLUMNS)

    result = LeagueResult(
        table=table,
        teams={r.team_code: r for r in ordered},
        failed_teams={code: failed[code] for code in codes if code in failed},
        league_ortg=league_ortg,
    )
    logger.info(
        "Rated %d players on %d teams (%d failed, league ORtg %s)",
        len(table), len(result.teams), len(result.failed_teams), league_ortg,
    )
    return result
