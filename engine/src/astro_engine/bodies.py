"""Planet definitions, aspect table, and sign data."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from astro_engine.errors import UnsupportedBodyError


class Body(str, Enum):
    """Bodies tracked in a natal chart."""

    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    PLUTO = "Pluto"


# Celestial body IDs for pyswisseph
# These map to swisseph constants
BODY_IDS: dict[Body, int] = {
    Body.SUN: 0,  # SE_SUN
    Body.MOON: 1,  # SE_MOON
    Body.MERCURY: 2,  # SE_MERCURY
    Body.VENUS: 3,  # SE_VENUS
    Body.MARS: 4,  # SE_MARS
    Body.JUPITER: 5,  # SE_JUPITER
    Body.SATURN: 6,  # SE_SATURN
    Body.URANUS: 7,  # SE_URANUS
    Body.NEPTUNE: 8,  # SE_NEPTUNE
    Body.PLUTO: 9,  # SE_PLUTO
}

# Chart output order
TRACKED_BODIES: tuple[Body, ...] = tuple(Body)

# Zodiac signs in order
SIGNS = [
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
]


class AspectDefinition(NamedTuple):
    angle: float
    orb: float
    influence: str


# Checked in this order; the first definition within orb wins
ASPECTS: dict[str, AspectDefinition] = {
    "conjunction": AspectDefinition(0.0, 8.0, "neutral"),
    "sextile": AspectDefinition(60.0, 4.0, "positive"),
    "square": AspectDefinition(90.0, 6.0, "negative"),
    "trine": AspectDefinition(120.0, 6.0, "positive"),
    "quincunx": AspectDefinition(150.0, 3.0, "neutral"),
    "opposition": AspectDefinition(180.0, 8.0, "negative"),
}

EXACT_ORB = 0.5


def parse_body(value: Body | str) -> Body:
    """Resolve a body identifier, accepting any capitalization."""
    if isinstance(value, Body):
        return value
    key = str(value).strip().lower()
    for body in Body:
        if body.value.lower() == key:
            return body
    raise UnsupportedBodyError(f"Unsupported body: {value}")
