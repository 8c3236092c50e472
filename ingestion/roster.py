"""Roster loading - the 64 (or 68, with play-in teams) tournament teams.

Supports:
1. Scraping the forecast page team table
2. JSON roster files (as written by save_roster)
3. CSV roster files
"""

import json
import logging
import os
from collections import defaultdict

import pandas as pd
import requests
from bs4 import BeautifulSoup

from models.errors import FetchError, ValidationError
from models.team import Team

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
}


def fetch_roster(url: str, timeout: int = 30) -> list[Team]:
    """Scrape the team table from the forecast page."""
    logger.info("Fetching teams from %s", url)
    try:
        resp = requests.get(url, headers=HEADERS, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Could not fetch teams: {e}") from e
    return parse_roster_html(resp.text)


def parse_roster_html(html: str) -> list[Team]:
    """Parse rows of `#team-table`.

    Each row has a `.team-name` cell shaped like `Gonzaga <span>1</span>`
    and a `.region` cell.
    """
    soup = BeautifulSoup(html, "html.parser")
    teams = []

    for row in soup.select("#team-table tbody tr"):
        name_cell = row.select_one(".team-name")
        region_cell = row.select_one(".region")
        if name_cell is None or region_cell is None:
            raise ValidationError("Unexpected team row structure")

        seed_tag = name_cell.find("span")
        if seed_tag is None:
            raise ValidationError("No seed found", team=name_cell.get_text(strip=True))
        name = "".join(name_cell.find_all(string=True, recursive=False)).strip()
        if not name:
            raise ValidationError("No team name found")

        team = Team.create(name, region_cell.get_text(strip=True), seed_tag.get_text(strip=True))
        logger.info("Found team %s", team.name)
        teams.append(team)

    return teams


def save_roster(teams: list[Team], filepath: str):
    """Save teams to a JSON list of {name, region, seed} records."""
    data = [
        {"name": team.name, "region": team.region.value, "seed": team.seed.value}
        for team in teams
    ]
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info("Saved %d teams to %s", len(teams), filepath)


def load_roster(filepath: str) -> list[Team]:
    """Load teams saved by save_roster."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    try:
        return [Team.create(rec["name"], rec["region"], rec["seed"]) for rec in data]
    except KeyError as e:
        raise ValidationError(f"Roster record missing field {e}") from None


def load_roster_csv(filepath: str) -> list[Team]:
    """Load teams from a CSV with columns name, region, seed."""
    df = pd.read_csv(filepath, dtype=str)
    df.columns = [c.strip().lower() for c in df.columns]
    missing = {"name", "region", "seed"} - set(df.columns)
    if missing:
        raise ValidationError(f"Roster CSV missing columns: {', '.join(sorted(missing))}")

    return [Team.create(row["name"], row["region"], row["seed"]) for _, row in df.iterrows()]


def split_play_in(teams: list[Team]) -> tuple[list[Team], list[tuple[Team, Team]]]:
    """Separate bracket lines held by two teams (play-in games) from the rest.

    Returns:
        (teams with a bracket line to themselves, [(team_a, team_b), ...])
    """
    by_line = defaultdict(list)
    for team in teams:
        by_line[(team.region, team.seed)].append(team)

    main, pairs = [], []
    for line in sorted(by_line, key=lambda l: (l[0].index, l[1])):
        group = by_line[line]
        if len(group) == 1:
            main.append(group[0])
        elif len(group) == 2:
            pairs.append((group[0], group[1]))
        else:
            raise ValidationError(
                f"{len(group)} teams share {line[0]} #{line[1]}", team=group[-1].name
            )
    return main, pairs


def exclude_teams(teams: list[Team], names) -> list[Team]:
    """Drop teams by name (play-in losers)."""
    names = set(names)
    unknown = names - {team.name for team in teams}
    if unknown:
        raise ValidationError(f"Unknown teams to exclude: {', '.join(sorted(unknown))}")
    return [team for team in teams if team.name not in names]
