"""Shared fixtures and fake collaborators."""

import pytest

from models.errors import ActionError, PredictionNotFound
from models.team import Region, Team


def make_roster():
    """64 teams named like "West 1" ... "Midwest 16"."""
    return [
        Team.create(f"{region.value} {seed}", region, seed)
        for region in Region
        for seed in range(1, 17)
    ]


class FixedRng:
    """Random source that always draws the same value."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


class FlatPredictions:
    """Same reading for every team and round, except the missing ones."""

    def __init__(self, reading=50, missing=()):
        self.reading = reading
        self.missing = set(missing)
        self.requests = []

    def win_probability(self, team, kind):
        self.requests.append((team, kind))
        if (team, kind) in self.missing:
            raise PredictionNotFound("No prediction available", team=team, round_kind=kind)
        return self.reading


class RecordingSink:
    """Keeps picks in order; fails on the listed (team, round) picks."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.picks = []

    def apply_winner(self, team, kind):
        if (team, kind) in self.fail_on:
            raise ActionError("Click failed", team=team, round_kind=kind)
        self.picks.append((team, kind))


@pytest.fixture
def roster():
    return make_roster()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def first_team_rng():
    """Draws 0.0, so the first team wins whenever its percent is above 0."""
    return FixedRng(0.0)


@pytest.fixture
def second_team_rng():
    """Draws 0.99, so the second team wins whenever the first is below 100%."""
    return FixedRng(0.99)


@pytest.fixture
def fakes():
    """The fake collaborator classes, for tests that need custom instances."""
    class Fakes:
        Rng = FixedRng
        Predictions = FlatPredictions
        Sink = RecordingSink
    return Fakes
