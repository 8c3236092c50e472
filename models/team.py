"""Team data model."""

from dataclasses import dataclass
from enum import Enum

from models.errors import ValidationError


class Region(Enum):
    WEST = "West"
    EAST = "East"
    SOUTH = "South"
    MIDWEST = "Midwest"

    @property
    def index(self) -> int:
        return REGION_INDEX[self]

    @classmethod
    def parse(cls, text: str) -> "Region":
        """Look up a region by name, ignoring case and surrounding whitespace."""
        for region in cls:
            if region.value.lower() == str(text).strip().lower():
                return region
        raise ValidationError(f"Unexpected region {text!r}")

    def __str__(self):
        return self.value


# Regions 0 and 1 meet in one national semifinal, 2 and 3 in the other.
REGION_INDEX = {
    Region.WEST: 0,
    Region.EAST: 1,
    Region.SOUTH: 2,
    Region.MIDWEST: 3,
}


@dataclass(frozen=True, order=True)
class Seed:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Seed must be an integer, got {self.value!r}")
        if not 1 <= self.value <= 16:
            raise ValidationError(f"Out of bounds seed value {self.value}")

    @classmethod
    def of(cls, value) -> "Seed":
        """Build a seed from an int or a numeric string."""
        if isinstance(value, Seed):
            return value
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                raise ValidationError(f"Seed must be numeric, got {value!r}") from None
        return cls(value)

    def __int__(self):
        return self.value

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Team:
    name: str
    region: Region
    seed: Seed

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("Team name must not be empty")

    @classmethod
    def create(cls, name: str, region, seed) -> "Team":
        """Build a team from raw roster values (region name, seed number)."""
        if not isinstance(region, Region):
            region = Region.parse(region)
        return cls(name=str(name).strip(), region=region, seed=Seed.of(seed))

    def __str__(self):
        return f"({self.seed}) {self.name}"
