"""Bracket Autopilot - CLI entry point.

Usage:
    python cli.py fetch-teams [--url URL] [--output teams.json]
    python cli.py simulate [--teams teams.json] [--predictions preds.csv]
                           [--sink console|csv|http] [--seed 42]
                           [--resume [--state state.json]] [--eliminated NAME ...]
    python cli.py show [--teams teams.json] [--state state.json]
"""

import argparse
import os
import sys

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config
from config import logger
from models.errors import BracketError, ValidationError


def load_teams(filepath: str):
    """Load a roster from JSON or CSV, by file extension."""
    from ingestion.roster import load_roster, load_roster_csv
    if filepath.lower().endswith(".csv"):
        return load_roster_csv(filepath)
    return load_roster(filepath)


def make_predictions(args):
    if args.predictions:
        from ingestion.predictions import load_predictions_csv
        return load_predictions_csv(args.predictions)
    from ingestion.predictions import ForecastPagePredictions
    return ForecastPagePredictions(args.url, timeout=config.REQUEST_TIMEOUT)


def make_sink(args, teams):
    if args.sink == "csv":
        from output.pick_sinks import CsvPickSink
        return CsvPickSink(args.output, teams)
    if args.sink == "http":
        if not args.endpoint:
            raise ValidationError("--sink http needs --endpoint or ACTION_ENDPOINT")
        from output.pick_sinks import HttpPickSink
        return HttpPickSink(args.endpoint, timeout=config.REQUEST_TIMEOUT)
    from output.pick_sinks import ConsolePickSink
    return ConsolePickSink()


def make_reader(args, teams):
    if args.state:
        from ingestion.bracket_state import load_bracket_state
        return load_bracket_state(args.state)
    from ingestion.bracket_state import fetch_bracket_state
    return fetch_bracket_state(config.BRACKET_URL, teams, timeout=config.REQUEST_TIMEOUT)


# --- Commands ---

def cmd_fetch_teams(args):
    """Scrape the roster from the forecast page."""
    from ingestion.roster import fetch_roster, save_roster
    teams = fetch_roster(args.url, timeout=config.REQUEST_TIMEOUT)
    save_roster(teams, args.output)
    print(f"\nSaved {len(teams)} teams to {args.output}")


def cmd_simulate(args):
    """Simulate (or finish) the bracket and apply every pick."""
    from engine.simulator import resume_tournament, simulate_play_in, simulate_tournament
    from ingestion.roster import exclude_teams, split_play_in
    from models.bracket import Round, Tournament
    from output.printer import print_bracket, print_summary_table

    teams = load_teams(args.teams)
    predictions = make_predictions(args)
    sink = make_sink(args, teams)
    rng = np.random.default_rng(args.seed)

    _, pairs = split_play_in(teams)
    play_in = None
    if args.eliminated:
        teams = exclude_teams(teams, args.eliminated)
    elif pairs:
        if args.resume:
            raise ValidationError("Resuming with play-in teams needs --eliminated")
        print(f"\nSimulating {len(pairs)} play-in games...")
        play_in = Round.play_in(pairs)
        losers = simulate_play_in(play_in, predictions, sink, rng=rng)
        teams = exclude_teams(teams, losers)

    if args.resume:
        reader = make_reader(args, teams)
        tournament = resume_tournament(teams, reader, predictions, sink, rng=rng,
                                       play_in=play_in, show_progress=True)
    else:
        tournament = Tournament.from_teams(teams, play_in=play_in)
        simulate_tournament(tournament, predictions, sink, rng=rng, show_progress=True)

    print_bracket(tournament)
    print_summary_table(tournament)


def cmd_show(args):
    """Display the bracket as currently observed."""
    from ingestion.roster import exclude_teams
    from models.bracket import Tournament
    from output.printer import print_bracket

    teams = load_teams(args.teams)
    if args.eliminated:
        teams = exclude_teams(teams, args.eliminated)
    reader = make_reader(args, teams)
    print_bracket(Tournament.from_observed(teams, reader))


# --- Main ---

def main():
    parser = argparse.ArgumentParser(
        description="Bracket Autopilot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. python cli.py fetch-teams                         # Save the roster
  2. python cli.py simulate --sink http --seed 7      # Fill in the bracket
  3. python cli.py simulate --sink http --resume      # Finish after a failure
  4. python cli.py show                                # Look at the bracket
        """
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # fetch-teams
    p_teams = subparsers.add_parser("fetch-teams", help="Scrape the team roster")
    p_teams.add_argument("--url", default=config.FORECAST_URL)
    p_teams.add_argument("--output", default=config.TEAMS_PATH)

    # simulate
    p_sim = subparsers.add_parser("simulate", help="Simulate the bracket and apply picks")
    p_sim.add_argument("--teams", default=config.TEAMS_PATH, help="Roster JSON or CSV")
    p_sim.add_argument("--url", default=config.FORECAST_URL, help="Forecast page for predictions")
    p_sim.add_argument("--predictions", help="CSV file with predictions (instead of --url)")
    p_sim.add_argument("--sink", choices=["console", "csv", "http"], default="console")
    p_sim.add_argument("--output", default=config.PICKS_PATH, help="Picks file (for --sink csv)")
    p_sim.add_argument("--endpoint", default=config.ACTION_ENDPOINT, help="Pick endpoint (for --sink http)")
    p_sim.add_argument("--seed", type=int, default=config.DEFAULT_SEED)
    p_sim.add_argument("--resume", action="store_true", help="Continue from the observed bracket")
    p_sim.add_argument("--state", help="JSON bracket snapshot (instead of reading the bracket page)")
    p_sim.add_argument("--eliminated", nargs="+", help="Play-in losers to drop from the roster")

    # show
    p_show = subparsers.add_parser("show", help="Display the observed bracket")
    p_show.add_argument("--teams", default=config.TEAMS_PATH)
    p_show.add_argument("--state", help="JSON bracket snapshot (instead of reading the bracket page)")
    p_show.add_argument("--eliminated", nargs="+", help="Play-in losers to drop from the roster")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    commands = {
        "fetch-teams": cmd_fetch_teams,
        "simulate": cmd_simulate,
        "show": cmd_show,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        parser.print_help()
        return

    try:
        cmd_func(args)
    except BracketError as e:
        logger.error("%s", e)
        if args.command == "simulate":
            print("\nPicks made so far are still in place. Re-run with --resume to continue.")
        sys.exit(1)


if __name__ == "__main__":
    main()
