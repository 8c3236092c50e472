"""Win probability readings."""

import re

from models.errors import PercentFormatError

_PERCENT_RE = re.compile(r"^(\d{1,3})%$")

# Forecast pages clamp extreme odds instead of printing 100% / 0%.
_EDGE_READINGS = {">99%": 100, "<1%": 0}


def parse_percent(text: str) -> int:
    """Parse a percentage string like "73%" into an integer in [0, 100].

    ">99%" and "<1%" are read as 100 and 0.
    """
    reading = str(text).strip()
    if reading in _EDGE_READINGS:
        return _EDGE_READINGS[reading]
    match = _PERCENT_RE.match(reading)
    if not match:
        raise PercentFormatError(f"Unexpected percentage {text!r}")
    value = int(match.group(1))
    if value > 100:
        raise PercentFormatError(f"Percentage out of range {text!r}")
    return value


def normalize_percent(value) -> int:
    """Accept either an integer percent or a percentage string."""
    if isinstance(value, str):
        return parse_percent(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise PercentFormatError(f"Unexpected percentage {value!r}")
    if not 0 <= value <= 100:
        raise PercentFormatError(f"Percentage out of range {value!r}")
    return value


def first_team_wins(percent: int, draw: float) -> bool:
    """Decide a matchup from the first team's win percent and a draw in [0, 1)."""
    return draw < percent / 100
