"""Tests for observed bracket state readers."""

import json

import pytest
import requests

from ingestion.bracket_state import (
    PageBracketState, SnapshotBracketState, fetch_bracket_state, html_name, load_bracket_state,
)
from models.bracket import RoundKind
from models.errors import BracketError, FetchError, ValidationError
from models.team import Team

BRACKET_PAGE = """
<svg><g><g class="nodes">
  <g id="node-Gonzaga-5" class="node selected"></g>
  <g id="node-Gonzaga-4" class="node selected"></g>
  <g id="node-Gonzaga-3" class="node"></g>
  <g id="node-SaintPeters-5" class="node selected"></g>
  <g id="node-TexasAM-CorpusChristi-6" class="node selected"></g>
  <g id="node-Unknown-5" class="node selected"></g>
</g></g></svg>
"""


@pytest.fixture
def teams():
    return [
        Team.create("Gonzaga", "West", 1),
        Team.create("Saint Peter's", "East", 15),
        Team.create("Texas A&M-Corpus Christi", "Midwest", 16),
    ]


def test_html_name():
    assert html_name("Saint Mary's (CA)") == "SaintMarysCA"
    assert html_name("Texas A&M-Corpus Christi") == "TexasAM-CorpusChristi"


def test_snapshot_missing_round_is_empty():
    state = SnapshotBracketState({"Round 2": ["Gonzaga"]})
    assert state.observed_teams(RoundKind.of(2)) == {"Gonzaga"}
    assert state.observed_teams(RoundKind.of(3)) == set()


def test_load_bracket_state(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"Round 2": ["Gonzaga", "Baylor"], "Round 3": ["Gonzaga"]}))
    state = load_bracket_state(str(path))
    assert state.observed_teams(RoundKind.of(2)) == {"Gonzaga", "Baylor"}
    assert state.observed_teams(RoundKind.of(3)) == {"Gonzaga"}


def test_load_bracket_state_needs_an_object(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps(["Gonzaga"]))
    with pytest.raises(ValidationError):
        load_bracket_state(str(path))


def test_page_bracket_state(teams):
    state = PageBracketState.from_html(BRACKET_PAGE, teams)
    assert state.observed_teams(RoundKind.of(2)) == {"Gonzaga", "Saint Peter's"}
    assert state.observed_teams(RoundKind.of(3)) == {"Gonzaga"}
    assert state.observed_teams(RoundKind.of(4)) == set()
    assert state.observed_teams(RoundKind.of(1)) == {"Texas A&M-Corpus Christi"}


class ErrorResponse:
    text = ""

    def raise_for_status(self):
        raise requests.HTTPError("503 Server Error")


def test_fetch_bracket_state_error_status(monkeypatch, teams):
    monkeypatch.setattr(requests, "get", lambda *args, **kwargs: ErrorResponse())
    with pytest.raises(FetchError) as excinfo:
        fetch_bracket_state("http://bracket.test", teams)
    assert isinstance(excinfo.value, BracketError)
