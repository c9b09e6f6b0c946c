"""Main CLI interface for the BPM engine."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .data.aggregate import aggregate_player_games, aggregate_team_games
from .data.loader import DataLoader
from .data.providers import FrameTotalsProvider
from .errors import DataError
from .pipeline.league import LeagueConfig, compute_league
from .pipeline.team import SUMMARY_COLUMNS
from .ratings.constants import DEFAULT_CONSTANTS, load_constants


def compute_ratings(args):
    """Compute league-wide BPM from season totals."""
    print(f"Loading player totals from {args.players}...")
    try:
        players = DataLoader.load_player_totals(args.players)
        teams = DataLoader.load_team_totals(args.teams)
        positions = DataLoader.load_positions(args.positions) if args.positions else None
        constants = load_constants(args.constants) if args.constants else DEFAULT_CONSTANTS
    except (OSError, ValueError) as e:
        print(f"Error loading data: {e}")
        return 1

    print(f"Loaded {len(players)} player rows for {len(teams)} teams")

    provider = FrameTotalsProvider(players, teams, positions=positions)
    config = LeagueConfig(parallel_workers=args.workers, fail_fast=args.fail_fast, league_ortg=args.league_ortg)
    team_codes = args.team or None

    try:
        result = compute_league(team_codes, provider, constants=constants, config=config)
    except DataError as exc:
        print(f"Error: {exc}")
        return 1

    table = result.table if args.full else result.table[[c for c in SUMMARY_COLUMNS if c in result.table.columns]]
    print(f"\nSaving ratings to {args.output}...")
    DataLoader.save_table(table, args.output)

    print(f"\n{'='*60}")
    print(f"BPM - {len(result.teams)} TEAMS, {len(result.table)} PLAYERS")
    print(f"{'='*60}\n")
    if result.league_ortg is not None:
        print(f"League ORtg: {result.league_ortg:.2f}")
    print(f"Nominal position defaulted to 3.0 for {result.position_default_rate:.1%} of players")

    if not result.table.empty:
        print("\nTop players:")
        for row in result.table.head(args.top).itertuples():
            print(f"   - {row.player_id} ({row.team}): BPM {row.bpm:+.1f}  VORP {row.vorp:.1f}  {row.minutes:.0f} min")

    if result.diagnostics:
        print(f"\nPosition averages off 3.0 after fixed rounds: {len(result.diagnostics)}")
    if result.failed_teams:
        print("\nFailed teams:")
        for code, reason in result.failed_teams.items():
            print(f"   - {code}: {reason}")

    if args.summary:
        with open(args.summary, "w") as f:
            json.dump(result.summary(), f, indent=2)

    print("✓ Done!")
    return 0 if result.teams or not result.failed_teams else 1


def aggregate_games(args):
    """Collapse per-game box scores into season totals."""
    try:
        player_games = DataLoader.load_frame(args.player_games)
        team_games = DataLoader.load_frame(args.team_games)
        teams = aggregate_team_games(team_games)
        aligned = "game_id" in player_games.columns and "game_id" in team_games.columns
        players = aggregate_player_games(player_games, team_games if aligned else None)
    except (OSError, ValueError) as e:
        print(f"Error aggregating games: {e}")
        return 1

    if not aligned:
        print("Warning: no game_id column; player totals may include games dropped from team totals")

    out = Path(args.output_dir)
    DataLoader.save_table(players, out / "players.csv")
    DataLoader.save_table(teams, out / "teams.csv")
    print(f"✓ Wrote {len(players)} player stints and {len(teams)} teams to {out}")
    return 0


def create_sample(args):
    """Create sample data files."""
    print(f"Creating sample data in {args.output_dir}...")
    players_path, teams_path = DataLoader.create_sample_data(args.output_dir)
    print("✓ Sample data created!")
    print("\nYou can now compute ratings with:")
    print(f"  bpm-engine compute --players {players_path} --teams {teams_path} --output ratings.csv")
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Box Plus-Minus ratings from season box-score totals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    compute_parser = subparsers.add_parser("compute", help="Compute BPM for every team in the league")
    compute_parser.add_argument("--players", required=True, help="Player season totals (CSV or JSON)")
    compute_parser.add_argument("--teams", required=True, help="Team season totals (CSV or JSON)")
    compute_parser.add_argument("--positions", default=None, help="Player id -> nominal position lookup")
    compute_parser.add_argument("--constants", default=None, help="JSON overrides for model constants")
    compute_parser.add_argument("--output", "-o", default="ratings.csv", help="Output table (CSV or JSON)")
    compute_parser.add_argument("--summary", default=None, help="Optional run summary JSON")
    compute_parser.add_argument("--team", action="append", help="Only rate this team (repeatable)")
    compute_parser.add_argument("--workers", type=int, default=1, help="Worker processes for per-team runs")
    compute_parser.add_argument("--league-ortg", type=float, default=None, help="Override league average ORtg")
    compute_parser.add_argument("--fail-fast", action="store_true", help="Abort on the first team failure")
    compute_parser.add_argument("--full", action="store_true", help="Write every derived column")
    compute_parser.add_argument("--top", type=int, default=10, help="Players to print")

    aggregate_parser = subparsers.add_parser("aggregate", help="Aggregate per-game rows into season totals")
    aggregate_parser.add_argument("--player-games", required=True, help="Per-game player box scores")
    aggregate_parser.add_argument("--team-games", required=True, help="Per-game team box scores")
    aggregate_parser.add_argument("--output-dir", default="data/processed", help="Destination directory")

    sample_parser = subparsers.add_parser("sample", help="Create sample data files")
    sample_parser.add_argument("--output-dir", "-o", default="data/sample", help="Output directory")

    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "compute":
        return compute_ratings(args)
    elif args.command == "aggregate":
        return aggregate_games(args)
    elif args.command == "sample":
        return create_sample(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
