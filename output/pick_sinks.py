"""Places to send picks as the simulator makes them.

Each sink has apply_winner(team, round_kind) and raises ActionError when the
pick could not be applied. Sinks never retry.
"""

import csv
import logging
import os

import requests

from models.bracket import RoundKind
from models.errors import ActionError
from models.team import Team

logger = logging.getLogger(__name__)


class CsvPickSink:
    """Append picks to a CSV file.

    Columns: pick_number, round, region, seed, team
    """

    FIELDS = ["pick_number", "round", "region", "seed", "team"]

    def __init__(self, filepath: str, teams: list[Team]):
        self.filepath = filepath
        self.teams = {team.name: team for team in teams}
        self.pick_num = 0

    def apply_winner(self, team: str, kind: RoundKind):
        info = self.teams.get(team)
        try:
            directory = os.path.dirname(self.filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)
            new_file = not os.path.exists(self.filepath) or os.path.getsize(self.filepath) == 0
            with open(self.filepath, "a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                if new_file:
                    writer.writerow(self.FIELDS)
                self.pick_num += 1
                writer.writerow([
                    self.pick_num,
                    str(kind),
                    info.region.value if info else "",
                    info.seed.value if info else "",
                    team,
                ])
        except OSError as e:
            raise ActionError(f"Could not write pick: {e}", team=team, round_kind=kind) from e


class HttpPickSink:
    """POST each pick as JSON ({"team": ..., "round": ...}) to an endpoint."""

    def __init__(self, endpoint: str, session: requests.Session | None = None, timeout: int = 30):
        self.endpoint = endpoint
        self.session = session or requests.Session()
        self.timeout = timeout

    def apply_winner(self, team: str, kind: RoundKind):
        payload = {"team": team, "round": str(kind)}
        try:
            resp = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise ActionError(f"Pick rejected: {e}", team=team, round_kind=kind) from e
        logger.debug("Applied %s for %s", team, kind)


class ConsolePickSink:
    """Print picks instead of applying them anywhere (dry run)."""

    def __init__(self):
        self.picks: list[tuple[str, RoundKind]] = []

    def apply_winner(self, team: str, kind: RoundKind):
        self.picks.append((team, kind))
        print(f"  {str(kind):<9s} {team}")
