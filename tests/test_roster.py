"""Tests for roster loading and play-in handling."""

import json

import pytest
import requests

from ingestion.roster import (
    exclude_teams, fetch_roster, load_roster, load_roster_csv, parse_roster_html, save_roster,
    split_play_in,
)
from models.errors import BracketError, FetchError, ValidationError
from models.team import Region, Seed, Team

TEAM_TABLE = """
<table id="team-table">
  <thead><tr><th>Team</th><th>Region</th></tr></thead>
  <tbody>
    <tr><td class="team-name">Gonzaga <span>1</span></td><td class="region">West</td></tr>
    <tr><td class="team-name">Saint Peter's <span>15</span></td><td class="region">East</td></tr>
    <tr><td class="team-name">Texas A&amp;M-Corpus Christi <span>16</span></td><td class="region">Midwest</td></tr>
  </tbody>
</table>
"""


def test_parse_roster_html():
    teams = parse_roster_html(TEAM_TABLE)
    assert teams == [
        Team("Gonzaga", Region.WEST, Seed(1)),
        Team("Saint Peter's", Region.EAST, Seed(15)),
        Team("Texas A&M-Corpus Christi", Region.MIDWEST, Seed(16)),
    ]


def test_parse_roster_html_needs_a_seed():
    html = '<table id="team-table"><tbody><tr><td class="team-name">Duke</td>' \
           '<td class="region">West</td></tr></tbody></table>'
    with pytest.raises(ValidationError):
        parse_roster_html(html)


def test_fetch_roster_unreachable(monkeypatch):
    def offline(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", offline)
    with pytest.raises(FetchError) as excinfo:
        fetch_roster("http://forecast.test")
    assert isinstance(excinfo.value, BracketError)


def test_save_and_load_roster(tmp_path, roster):
    path = tmp_path / "data" / "teams.json"
    save_roster(roster, str(path))

    records = json.loads(path.read_text())
    assert records[0] == {"name": "West 1", "region": "West", "seed": 1}
    assert load_roster(str(path)) == roster


def test_load_roster_rejects_bad_seed(tmp_path):
    path = tmp_path / "teams.json"
    path.write_text(json.dumps([{"name": "Duke", "region": "East", "seed": 17}]))
    with pytest.raises(ValidationError):
        load_roster(str(path))


def test_load_roster_csv(tmp_path):
    path = tmp_path / "teams.csv"
    path.write_text("Name,Region,Seed\nKansas,Midwest,1\nBaylor,East,1\n")
    assert load_roster_csv(str(path)) == [
        Team("Kansas", Region.MIDWEST, Seed(1)),
        Team("Baylor", Region.EAST, Seed(1)),
    ]


def test_load_roster_csv_missing_column(tmp_path):
    path = tmp_path / "teams.csv"
    path.write_text("name,seed\nKansas,1\n")
    with pytest.raises(ValidationError):
        load_roster_csv(str(path))


def test_split_play_in(roster):
    extras = [
        Team.create("Wright St.", Region.MIDWEST, 16),
        Team.create("Notre Dame", Region.WEST, 11),
    ]
    main, pairs = split_play_in(roster + extras)

    assert len(main) == 62
    assert [(a.name, b.name) for a, b in pairs] == [
        ("West 11", "Notre Dame"),
        ("Midwest 16", "Wright St."),
    ]


def test_split_play_in_rejects_three_way_line(roster):
    extras = [Team.create(name, Region.EAST, 12) for name in ("A", "B")]
    with pytest.raises(ValidationError):
        split_play_in(roster + extras)


def test_exclude_teams(roster):
    remaining = exclude_teams(roster, ["West 1", "East 2"])
    assert len(remaining) == 62
    assert "West 1" not in {t.name for t in remaining}
    with pytest.raises(ValidationError):
        exclude_teams(roster, ["Nobody"])
