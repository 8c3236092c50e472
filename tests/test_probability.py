"""Unit tests for percentage readings."""

import pytest

from models.errors import PercentFormatError, ValidationError
from models.probability import first_team_wins, normalize_percent, parse_percent


@pytest.mark.parametrize("text,expected", [
    ("73%", 73),
    (">99%", 100),
    ("<1%", 0),
    ("0%", 0),
    ("100%", 100),
    (" 8% ", 8),
])
def test_parse_percent(text, expected):
    assert parse_percent(text) == expected


@pytest.mark.parametrize("text", ["73", "abc", "", "101%", "-5%", "7.5%", ">98%"])
def test_parse_percent_rejects_other_strings(text):
    with pytest.raises(PercentFormatError):
        parse_percent(text)


def test_percent_errors_are_validation_errors():
    with pytest.raises(ValidationError):
        parse_percent("lots")


def test_normalize_percent():
    assert normalize_percent(42) == 42
    assert normalize_percent(">99%") == 100
    with pytest.raises(PercentFormatError):
        normalize_percent(150)
    with pytest.raises(PercentFormatError):
        normalize_percent(0.5)


def test_first_team_wins_compares_draw_to_ratio():
    assert first_team_wins(73, 0.72)
    assert not first_team_wins(73, 0.73)
    assert first_team_wins(100, 0.999)
    assert not first_team_wins(0, 0.0)
