"""Tests for action sinks."""

import csv

import pytest
import requests

from models.bracket import PLAY_IN, RoundKind
from models.errors import ActionError
from output.pick_sinks import ConsolePickSink, CsvPickSink, HttpPickSink


class FakeResponse:
    def __init__(self, status=200):
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, status=200, error=None):
        self.status = status
        self.error = error
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append((url, json))
        if self.error:
            raise self.error
        return FakeResponse(self.status)


def test_csv_sink_appends_picks(tmp_path, roster):
    path = tmp_path / "out" / "picks.csv"
    sink = CsvPickSink(str(path), roster)
    sink.apply_winner("West 1", RoundKind.of(1))
    sink.apply_winner("Play-in Team", PLAY_IN)

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["pick_number", "round", "region", "seed", "team"],
        ["1", "Round 1", "West", "1", "West 1"],
        ["2", "Play-in", "", "", "Play-in Team"],
    ]


def test_csv_sink_write_failure(tmp_path, roster):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    sink = CsvPickSink(str(blocker / "picks.csv"), roster)
    with pytest.raises(ActionError) as excinfo:
        sink.apply_winner("West 1", RoundKind.of(1))
    assert excinfo.value.team == "West 1"


def test_http_sink_posts_pick():
    session = FakeSession()
    sink = HttpPickSink("http://bracket.test/picks", session=session)
    sink.apply_winner("Gonzaga", RoundKind.of(2))
    assert session.posts == [("http://bracket.test/picks", {"team": "Gonzaga", "round": "Round 2"})]


@pytest.mark.parametrize("session", [
    FakeSession(status=500),
    FakeSession(error=requests.Timeout("slow")),
])
def test_http_sink_failures_become_action_errors(session):
    sink = HttpPickSink("http://bracket.test/picks", session=session)
    with pytest.raises(ActionError) as excinfo:
        sink.apply_winner("Gonzaga", RoundKind.of(2))
    assert excinfo.value.round_kind == RoundKind.of(2)
    assert len(session.posts) == 1


def test_console_sink(capsys):
    sink = ConsolePickSink()
    sink.apply_winner("Gonzaga", RoundKind.of(6))
    assert sink.picks == [("Gonzaga", RoundKind.of(6))]
    assert "Gonzaga" in capsys.readouterr().out
