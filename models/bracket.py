"""Bracket data structure.

The bracket is a list of rounds, Round 1 (32 matchups) through Round 6 (the
championship), plus an optional play-in round that feeds nobody directly:
play-in losers are dropped from the roster before Round 1 is built.

Round 1 is laid out region by region:
- Region 0 (West):    matchups 0-7
- Region 1 (East):    matchups 8-15
- Region 2 (South):   matchups 16-23
- Region 3 (Midwest): matchups 24-31

Within a region a team's matchup comes from its seed via SEED_SLOT:
Slot 0: 1 v 16, Slot 1: 8 v 9, Slot 2: 5 v 12, Slot 3: 4 v 13,
Slot 4: 6 v 11, Slot 5: 3 v 14, Slot 6: 7 v 10, Slot 7: 2 v 15

The winner of matchup i plays in matchup i // 2 of the next round, taking the
first empty team slot there. Slots are only ever filled, never cleared.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from models.errors import StateError, ValidationError
from models.team import Seed, Team

# Bracket position of each (mirrored) seed within a region
SEED_SLOT = {1: 0, 8: 1, 5: 2, 4: 3, 6: 4, 3: 5, 7: 6, 2: 7}

NUM_ROUNDS = 6
NUM_TEAMS = 64
PLAY_IN_GAMES = 4
MATCHUPS_PER_REGION = 8


def seed_slot(seed: Seed) -> int:
    """Map a seed to its Round 1 matchup position (0-7) within its region.

    Seeds above 8 share the matchup of their first-round opponent (17 - seed).
    """
    value = int(seed)
    if value > 8:
        value = 17 - value
    return SEED_SLOT[value]


@dataclass(frozen=True, order=True)
class RoundKind:
    """Play-in (number 0) or Round n for n in 1..6."""

    number: int

    def __post_init__(self):
        if not 0 <= self.number <= NUM_ROUNDS:
            raise ValidationError(f"Invalid round number: {self.number}")

    @classmethod
    def of(cls, number: int) -> RoundKind:
        if not 1 <= number <= NUM_ROUNDS:
            raise ValidationError(f"Invalid round number: {number}")
        return cls(number)

    @classmethod
    def parse(cls, label) -> RoundKind:
        """Read labels like "Round 3", "round_3", "3" or "Play-in"."""
        if isinstance(label, RoundKind):
            return label
        if isinstance(label, int):
            return cls.of(label)
        text = str(label).strip().lower()
        for ch in " -_":
            text = text.replace(ch, "")
        if text in ("playin", "firstfour"):
            return PLAY_IN
        if text.startswith("round"):
            text = text[len("round"):]
        elif text.startswith("r"):
            text = text[1:]
        if not text.isdigit():
            raise ValidationError(f"Unexpected round label {label!r}")
        return cls.of(int(text))

    @property
    def is_play_in(self) -> bool:
        return self.number == 0

    @property
    def num_matchups(self) -> int:
        if self.is_play_in:
            return PLAY_IN_GAMES
        return 2 ** (NUM_ROUNDS - self.number)

    def __str__(self):
        if self.is_play_in:
            return "Play-in"
        return f"Round {self.number}"


PLAY_IN = RoundKind(0)
MAIN_ROUNDS = tuple(RoundKind(n) for n in range(1, NUM_ROUNDS + 1))


class Slot(IntEnum):
    FIRST = 0
    SECOND = 1


@dataclass
class Matchup:
    kind: RoundKind
    index: int
    teams: list[str | None] = field(default_factory=lambda: [None, None])
    winner_slot: Slot | None = None

    @property
    def is_full(self) -> bool:
        return all(name is not None for name in self.teams)

    @property
    def is_empty(self) -> bool:
        return all(name is None for name in self.teams)

    @property
    def is_decided(self) -> bool:
        return self.winner_slot is not None

    @property
    def winner(self) -> str | None:
        if self.winner_slot is None:
            return None
        return self.teams[self.winner_slot]

    @property
    def loser(self) -> str | None:
        if self.winner_slot is None:
            return None
        return self.teams[1 - self.winner_slot]

    def contains(self, name: str) -> bool:
        return name in self.teams

    def add_team(self, name: str):
        """Put a team in the first empty slot, then the second."""
        if self.teams[Slot.FIRST] is None:
            self.teams[Slot.FIRST] = name
        elif self.teams[Slot.SECOND] is None:
            self.teams[Slot.SECOND] = name
        else:
            raise StateError(
                f"Both teams already set in matchup {self.index} "
                f"({self.teams[0]} vs {self.teams[1]})",
                team=name, round_kind=self.kind,
            )
        return self

    def slot_of(self, name: str) -> Slot:
        for slot in Slot:
            if self.teams[slot] == name:
                return slot
        raise StateError(
            f"Team is not part of matchup {self.index}", team=name, round_kind=self.kind
        )

    def set_winner(self, slot):
        """Designate the winner by slot; a second call overwrites the first."""
        slot = Slot(slot)
        if self.teams[slot] is None:
            raise StateError(
                f"Cannot pick empty slot {slot.name} of matchup {self.index}",
                round_kind=self.kind,
            )
        self.winner_slot = slot

    def set_winner_team(self, name: str):
        self.set_winner(self.slot_of(name))


@dataclass
class Round:
    kind: RoundKind
    matchups: list[Matchup]

    def __post_init__(self):
        if len(self.matchups) != self.kind.num_matchups:
            raise ValidationError(
                f"{self.kind} needs {self.kind.num_matchups} matchups, got {len(self.matchups)}"
            )
        for i, matchup in enumerate(self.matchups):
            if matchup.index != i or matchup.kind != self.kind:
                raise ValidationError(f"Matchup {matchup.index} is out of place in {self.kind}")

    @classmethod
    def empty(cls, kind: RoundKind) -> Round:
        return cls(kind, [Matchup(kind, i) for i in range(kind.num_matchups)])

    @classmethod
    def play_in(cls, pairs: Sequence[tuple[Team, Team]]) -> Round:
        """Build the play-in round from pairs of teams sharing a region and seed."""
        if len(pairs) != PLAY_IN_GAMES:
            raise ValidationError(f"Expected {PLAY_IN_GAMES} play-in games, got {len(pairs)}")
        matchups = []
        for i, (first, second) in enumerate(pairs):
            if (first.region, first.seed) != (second.region, second.seed):
                raise ValidationError(
                    f"Play-in teams {first.name} and {second.name} don't share a bracket line"
                )
            matchups.append(Matchup(PLAY_IN, i, [first.name, second.name]))
        return cls(PLAY_IN, matchups)

    def __len__(self):
        return len(self.matchups)

    def __iter__(self):
        return iter(self.matchups)

    @property
    def is_decided(self) -> bool:
        return all(m.is_decided for m in self.matchups)

    def find(self, name: str) -> Matchup:
        """Find the matchup a team plays in during this round."""
        for matchup in self.matchups:
            if matchup.contains(name):
                return matchup
        raise StateError("Team not found", team=name, round_kind=self.kind)

    def winners(self) -> list[str | None]:
        return [m.winner for m in self.matchups]

    def losers(self) -> list[str]:
        return [m.loser for m in self.matchups if m.loser is not None]


@dataclass
class Tournament:
    """A bracket of consecutive rounds ending with the championship."""

    rounds: list[Round]
    teams: dict[str, Team] = field(default_factory=dict)
    play_in: Round | None = None

    def __post_init__(self):
        if not self.rounds:
            raise ValidationError("A tournament needs at least one round")
        for prev, nxt in zip(self.rounds, self.rounds[1:]):
            if prev.kind.is_play_in or nxt.kind.number != prev.kind.number + 1:
                raise ValidationError(f"{nxt.kind} can't follow {prev.kind}")
        if self.rounds[-1].kind.num_matchups != 1:
            raise ValidationError("The last round must be a single matchup")

    @classmethod
    def from_teams(cls, teams: Iterable[Team], play_in: Round | None = None) -> Tournament:
        """Build Round 1 from a 64-team roster and leave Rounds 2-6 empty."""
        teams = list(teams)
        if len(teams) != NUM_TEAMS:
            raise ValidationError(f"Expected {NUM_TEAMS} teams, got {len(teams)}")

        by_name: dict[str, Team] = {}
        lines: dict[tuple, Team] = {}
        for team in teams:
            if team.name in by_name:
                raise ValidationError("Duplicate team name", team=team.name)
            line = (team.region, team.seed)
            if line in lines:
                raise ValidationError(
                    f"{team.region} #{team.seed} already taken by {lines[line].name}",
                    team=team.name,
                )
            by_name[team.name] = team
            lines[line] = team

        first = Round.empty(MAIN_ROUNDS[0])
        # Better seed first within each matchup
        for team in sorted(teams, key=lambda t: (t.region.index, t.seed)):
            slot = seed_slot(team.seed) + MATCHUPS_PER_REGION * team.region.index
            first.matchups[slot].add_team(team.name)

        for matchup in first:
            if not matchup.is_full:
                raise ValidationError(
                    f"Matchup {matchup.index} has {2 - matchup.teams.count(None)} teams",
                    round_kind=first.kind,
                )

        rounds = [first] + [Round.empty(kind) for kind in MAIN_ROUNDS[1:]]
        return cls(rounds=rounds, teams=by_name, play_in=play_in)

    @classmethod
    def from_observed(cls, teams: Iterable[Team], reader, play_in: Round | None = None) -> Tournament:
        """Build a fresh tournament and backfill what the reader has seen."""
        tournament = cls.from_teams(teams, play_in=play_in)
        observed = {kind: reader.observed_teams(kind) for kind in MAIN_ROUNDS}
        return tournament.reconcile(observed)

    def round(self, kind: RoundKind) -> Round:
        if kind.is_play_in and self.play_in is not None:
            return self.play_in
        for rnd in self.rounds:
            if rnd.kind == kind:
                return rnd
        raise StateError("No such round in this tournament", round_kind=kind)

    def next_round(self, kind: RoundKind) -> Round | None:
        """The round a winner of `kind` advances into, if any."""
        if kind.is_play_in:
            return None
        for rnd, nxt in zip(self.rounds, self.rounds[1:]):
            if rnd.kind == kind:
                return nxt
        return None

    def decide(self, kind: RoundKind, index: int, slot) -> str:
        """Set the winner of a matchup and advance it into the next round.

        Deciding the same winner again does nothing. Changing the winner after
        it has advanced would put a third team in the next matchup.
        """
        matchup = self.round(kind).matchups[index]
        slot = Slot(slot)
        nxt = self.next_round(kind)
        if matchup.is_decided:
            if matchup.winner_slot == slot:
                return matchup.winner
            if nxt is not None:
                raise StateError(
                    f"Matchup {index} already won by {matchup.winner}",
                    team=matchup.teams[slot], round_kind=kind,
                )
        target = nxt.matchups[index // 2] if nxt is not None else None
        if target is not None and target.is_full:
            raise StateError(
                f"Both teams already set in matchup {target.index}",
                team=matchup.teams[slot], round_kind=nxt.kind,
            )
        matchup.set_winner(slot)
        if target is not None:
            target.add_team(matchup.winner)
        return matchup.winner

    def decide_team(self, kind: RoundKind, name: str) -> str:
        matchup = self.round(kind).find(name)
        return self.decide(kind, matchup.index, matchup.slot_of(name))

    def reconcile(self, observed: Mapping[RoundKind, Iterable[str]]) -> Tournament:
        """Backfill decisions from teams observed in later rounds.

        A team seen in round n must have won every round before it, so the
        winners of round n are everyone seen in round n + 1 or later. Missing
        rounds count as nothing observed. Decisions are applied in bracket
        order, the same order a live run uses.
        """
        inferred: dict[RoundKind, set[str]] = {}
        seen: set[str] = set()
        for rnd in reversed(self.rounds[1:]):
            seen |= set(observed.get(rnd.kind, ()))
            inferred[rnd.kind] = set(seen)

        for rnd, nxt in zip(self.rounds, self.rounds[1:]):
            remaining = set(inferred[nxt.kind])
            for matchup in rnd:
                for slot, name in enumerate(matchup.teams):
                    if name in remaining:
                        self.decide(rnd.kind, matchup.index, slot)
                        remaining.discard(name)
            if remaining:
                raise StateError("Team not found", team=min(remaining), round_kind=rnd.kind)
        return self

    @property
    def final(self) -> Matchup:
        return self.rounds[-1].matchups[0]

    @property
    def is_complete(self) -> bool:
        return self.final.is_decided

    @property
    def champion(self) -> str | None:
        return self.final.winner
