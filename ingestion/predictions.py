"""Win probability sources.

Every source answers win_probability(team, round_kind) with the team's win
percentage for that round, either as an int in [0, 100] or as the raw string
shown on the forecast ("73%", ">99%", "<1%"). A missing prediction raises
PredictionNotFound; nothing falls back to a default.
"""

import logging

import pandas as pd
import requests
from bs4 import BeautifulSoup

from models.bracket import MAIN_ROUNDS, PLAY_IN, RoundKind
from models.errors import PredictionNotFound, ValidationError

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
}


class StaticPredictions:
    """Predictions held in memory: {team: {round_kind: reading}}."""

    def __init__(self, table: dict[str, dict]):
        self.table = {
            team: {RoundKind.parse(kind): reading for kind, reading in rounds.items()}
            for team, rounds in table.items()
        }

    def win_probability(self, team: str, kind: RoundKind):
        try:
            return self.table[team][kind]
        except KeyError:
            raise PredictionNotFound("No prediction available", team=team, round_kind=kind) from None


def load_predictions_csv(filepath: str) -> StaticPredictions:
    """Load predictions from a CSV.

    Expected columns: team, Round 1, ..., Round 6 [, Play-in]
    Cells hold percentages ("73%", ">99%") or plain integers; blank cells
    mean no prediction.
    """
    df = pd.read_csv(filepath, dtype=str)
    team_col = df.columns[0]
    round_cols = {}
    for col in df.columns[1:]:
        try:
            round_cols[col] = RoundKind.parse(col)
        except ValidationError:
            logger.warning("Ignoring unknown predictions column %r", col)

    table = {}
    for _, row in df.iterrows():
        name = str(row[team_col]).strip()
        readings = {}
        for col, kind in round_cols.items():
            value = row[col]
            if pd.isna(value) or not str(value).strip():
                continue
            value = str(value).strip()
            readings[kind] = int(value) if value.isdigit() else value
        table[name] = readings

    logger.info("Loaded predictions for %d teams from %s", len(table), filepath)
    return StaticPredictions(table)


class ForecastPagePredictions:
    """Predictions scraped from the forecast page team table.

    The page is fetched on first use. Each `#team-table` row carries the
    team name (`.team-name`, seed in a nested span) and one `td.prob` cell
    per round, Round 1 first; an optional leading `td.prob.play-in` cell
    holds the play-in odds.
    """

    def __init__(self, url: str, session: requests.Session | None = None, timeout: int = 30):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout
        self._table: dict[str, dict[RoundKind, str]] | None = None

    def win_probability(self, team: str, kind: RoundKind):
        if self._table is None:
            self._table = self._fetch(team, kind)
        try:
            return self._table[team][kind]
        except KeyError:
            raise PredictionNotFound("No prediction available", team=team, round_kind=kind) from None

    def _fetch(self, team: str, kind: RoundKind) -> dict[str, dict[RoundKind, str]]:
        logger.info("Fetching predictions from %s", self.url)
        try:
            resp = self.session.get(self.url, headers=HEADERS, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise PredictionNotFound(
                f"Could not fetch predictions: {e}", team=team, round_kind=kind
            ) from e
        return parse_forecast_html(resp.text)


def parse_forecast_html(html: str) -> dict[str, dict[RoundKind, str]]:
    """Parse per-round win percentages out of the forecast team table."""
    soup = BeautifulSoup(html, "html.parser")
    table = {}

    for row in soup.select("#team-table tbody tr"):
        name_cell = row.select_one(".team-name")
        if name_cell is None:
            continue
        name = "".join(name_cell.find_all(string=True, recursive=False)).strip()

        readings = {}
        play_in = row.select_one("td.prob.play-in")
        if play_in is not None:
            readings[PLAY_IN] = play_in.get_text(strip=True)
        cells = [c for c in row.select("td.prob") if "play-in" not in c.get("class", [])]
        for kind, cell in zip(MAIN_ROUNDS, cells):
            text = cell.get_text(strip=True)
            # Eliminated teams show an empty or dashed cell
            if text and text != "-":
                readings[kind] = text
        table[name] = readings

    if not table:
        logger.warning("No predictions found on the forecast page")
    return table
