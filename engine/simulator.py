"""Round-by-round tournament simulator.

Walks the bracket in order (round by round, matchup by matchup), asks the
prediction source for the first team's win percentage, draws a random number
to pick the winner, advances it, and reports the pick to the action sink.

Nothing is retried: the first failed lookup or action aborts the run. Picks
already reported stay in place, so the way to recover is to rebuild the
tournament from the bracket as it now looks (see resume_tournament) and carry on.
"""

import logging
from functools import partial

import numpy as np
from tqdm import tqdm

from models.bracket import Matchup, Round, Tournament
from models.errors import BracketError, PercentFormatError, StateError
from models.probability import first_team_wins, normalize_percent
from models.team import Team

logger = logging.getLogger(__name__)


def simulate_tournament(tournament: Tournament, predictions, sink,
                        rng=None, seed: int | None = None,
                        show_progress: bool = False) -> str:
    """Decide every open matchup of the tournament.

    Args:
        tournament: The bracket to fill in; matchups already decided are kept
        predictions: Source of win percentages, keyed by (team, round)
        sink: Where each pick is applied
        rng: Random source with a random() method; defaults to a numpy Generator
        seed: Seed for the default random source
        show_progress: Show a progress bar over rounds

    Returns:
        Name of the champion
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    rounds = tournament.rounds
    if show_progress:
        rounds = tqdm(rounds, desc="Simulating rounds")

    previous = None
    for rnd in rounds:
        if previous is not None and not previous.is_decided:
            raise StateError(f"{previous.kind} is not finished", round_kind=rnd.kind)
        for matchup in rnd:
            if matchup.is_decided:
                continue
            decide = partial(tournament.decide, matchup.kind, matchup.index)
            winner = _play(matchup, predictions, sink, rng, decide)
            logger.info("%s matchup %d: %s", rnd.kind, matchup.index, winner)
        previous = rnd

    champion = tournament.champion
    logger.info("Champion: %s", champion)
    return champion


def simulate_play_in(play_in: Round, predictions, sink, rng=None,
                     seed: int | None = None) -> list[str]:
    """Decide the play-in games and return the losing teams.

    The caller drops the losers from the roster before building Round 1.
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    for matchup in play_in:
        if matchup.is_decided:
            continue
        winner = _play(matchup, predictions, sink, rng, matchup.set_winner)
        logger.info("%s matchup %d: %s", play_in.kind, matchup.index, winner)

    return play_in.losers()


def resume_tournament(teams: list[Team], reader, predictions, sink,
                      rng=None, seed: int | None = None,
                      play_in: Round | None = None,
                      show_progress: bool = False) -> Tournament:
    """Rebuild the tournament from the observed bracket and finish it."""
    tournament = Tournament.from_observed(teams, reader, play_in=play_in)
    decided = sum(m.is_decided for rnd in tournament.rounds for m in rnd)
    logger.info("Recovered %d decided matchups from the observed bracket", decided)
    simulate_tournament(tournament, predictions, sink, rng=rng, seed=seed,
                        show_progress=show_progress)
    return tournament


def _play(matchup: Matchup, predictions, sink, rng, decide) -> str:
    """Pick, apply and report the winner of a single matchup."""
    first = matchup.teams[0]
    if first is None or matchup.teams[1] is None:
        raise StateError(f"Matchup {matchup.index} is missing a team",
                         team=first, round_kind=matchup.kind)
    try:
        reading = predictions.win_probability(first, matchup.kind)
        try:
            percent = normalize_percent(reading)
        except PercentFormatError as e:
            raise PercentFormatError(str(e), team=first, round_kind=matchup.kind) from e
        draw = rng.random()
        slot = 0 if first_team_wins(percent, draw) else 1
        decide(slot)
        winner = matchup.winner
        sink.apply_winner(winner, matchup.kind)
    except BracketError as e:
        logger.error("Stopped at %s matchup %d (%s vs %s): %s",
                     matchup.kind, matchup.index, matchup.teams[0], matchup.teams[1], e)
        raise
    return winner
