"""Observed bracket state, used to resume an interrupted run.

A reader answers observed_teams(round_kind) with the names of the teams that
currently appear in that round of the external bracket. Rounds with nothing
observed come back as an empty set.
"""

import json
import logging

import requests
from bs4 import BeautifulSoup

from models.bracket import NUM_ROUNDS, RoundKind
from models.errors import FetchError, ValidationError
from models.team import Team

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
}


def html_name(name: str) -> str:
    """Team name as used in bracket node ids (letters and hyphens only)."""
    return "".join(c for c in name if c == "-" or c.isalpha())


class SnapshotBracketState:
    """A fixed snapshot: {round_kind: team names}."""

    def __init__(self, observed: dict | None = None):
        self.observed = {
            RoundKind.parse(kind): set(names) for kind, names in (observed or {}).items()
        }

    def observed_teams(self, kind: RoundKind) -> set[str]:
        return set(self.observed.get(kind, ()))


def load_bracket_state(filepath: str) -> SnapshotBracketState:
    """Load a snapshot from JSON: {"Round 2": ["Gonzaga", ...], ...}."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValidationError(f"Expected an object keyed by round in {filepath}")
    return SnapshotBracketState(data)


class PageBracketState(SnapshotBracketState):
    """Bracket state read from the interactive bracket page.

    Picked teams show up as `.selected` nodes with ids like
    `node-<html name>-<depth>`, where depth is 7 minus the round number.
    """

    @classmethod
    def from_html(cls, html: str, teams: list[Team]) -> "PageBracketState":
        by_html_name = {html_name(team.name): team.name for team in teams}
        soup = BeautifulSoup(html, "html.parser")
        observed: dict[RoundKind, set[str]] = {}

        for node in soup.select('[id^="node-"].selected'):
            node_name, _, depth = node["id"][len("node-"):].rpartition("-")
            if not depth.isdigit() or node_name not in by_html_name:
                logger.debug("Skipping bracket node %s", node["id"])
                continue
            round_num = NUM_ROUNDS + 1 - int(depth)
            if not 1 <= round_num <= NUM_ROUNDS:
                continue
            kind = RoundKind.of(round_num)
            observed.setdefault(kind, set()).add(by_html_name[node_name])

        return cls(observed)


def fetch_bracket_state(url: str, teams: list[Team], timeout: int = 30) -> PageBracketState:
    """Fetch the bracket page and read which teams sit in which round."""
    logger.info("Fetching bracket state from %s", url)
    try:
        resp = requests.get(url, headers=HEADERS, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Could not fetch bracket state: {e}") from e
    return PageBracketState.from_html(resp.text, teams)
