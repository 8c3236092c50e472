"""Central configuration for the bracket autopilot.

Only cli.py reads this module; the bracket engine gets everything it needs
through the collaborators passed to it.
"""

import logging
import os
import sys

# Forecast page: team table with seeds, regions and per-round win odds
FORECAST_URL = os.environ.get(
    "FORECAST_URL", "https://projects.fivethirtyeight.com/2022-march-madness-predictions/"
)

# Interactive bracket page, read when resuming an interrupted run
BRACKET_URL = os.environ.get("BRACKET_URL", FORECAST_URL)

# Endpoint that accepts picks as JSON ({"team": ..., "round": ...})
ACTION_ENDPOINT = os.environ.get("ACTION_ENDPOINT", "")

REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "30"))

# Files
DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
TEAMS_PATH = os.path.join(DATA_DIR, "teams.json")
PICKS_PATH = os.path.join(DATA_DIR, "picks.csv")

# Simulation
DEFAULT_SEED = None  # None = fresh entropy on every run

# Logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("bracket-autopilot")
