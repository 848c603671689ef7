"""Pydantic schemas for natal chart data."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator

AspectType = Literal["conjunction", "sextile", "square", "trine", "quincunx", "opposition"]
Influence = Literal["positive", "negative", "neutral"]


class HouseSystem(str, Enum):
    """Supported house-division systems."""

    WHOLE_SIGN = "whole_sign"
    EQUAL = "equal"
    PLACIDUS = "placidus"

    @classmethod
    def _missing_(cls, value: object) -> HouseSystem | None:
        # Accept short codes and loose spellings ("WHOLE", "P", "Whole Sign")
        key = str(value).strip().lower().replace(" ", "_").replace("-", "_")
        aliases = {
            "whole": cls.WHOLE_SIGN,
            "w": cls.WHOLE_SIGN,
            "e": cls.EQUAL,
            "p": cls.PLACIDUS,
        }
        if key in aliases:
            return aliases[key]
        for member in cls:
            if member.value == key:
                return member
        return None


class ZodiacSign(BaseModel):
    """Sexagesimal placement of a longitude within its sign."""

    sign: str
    degree: int = Field(ge=0, lt=30)
    minute: int = Field(ge=0, lt=60)
    second: int = Field(ge=0, lt=60)

    model_config = {"frozen": True}


class PlanetPosition(BaseModel):
    """Geocentric position of a body at the chart instant."""

    name: str
    longitude: float = Field(ge=0.0, lt=360.0)
    latitude: float
    distance: float = Field(gt=0.0)
    speed: float  # degrees per day
    retrograde: bool
    zodiac_sign: ZodiacSign

    model_config = {"frozen": True}


class HouseCusp(BaseModel):
    """Starting longitude of a house."""

    house: int = Field(ge=1, le=12)
    position: float = Field(ge=0.0, lt=360.0)
    zodiac_sign: ZodiacSign
    approximate: bool = False

    model_config = {"frozen": True}


class Aspect(BaseModel):
    """An aspect between two planets."""

    planet1: str
    planet2: str
    angle: float = Field(ge=0.0, lt=360.0)
    type: AspectType
    orb: float = Field(ge=0.0)
    exact: bool
    influence: Influence

    model_config = {"frozen": True}


class ChartLocation(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    timezone: float = 0.0  # offset in hours, kept for display

    model_config = {"frozen": True}


class NatalChart(BaseModel):
    """Complete natal chart data."""

    planets: list[PlanetPosition]
    houses: list[HouseCusp]
    ascendant: float = Field(ge=0.0, lt=360.0)
    midheaven: float = Field(ge=0.0, lt=360.0)
    date: datetime
    location: ChartLocation
    house_system: HouseSystem = HouseSystem.WHOLE_SIGN

    model_config = {"frozen": True}

    @field_validator("houses")
    @classmethod
    def _twelve_houses(cls, houses: list[HouseCusp]) -> list[HouseCusp]:
        numbers = [h.house for h in houses]
        if sorted(numbers) != list(range(1, 13)):
            raise ValueError(f"expected houses 1..12 exactly once, got {numbers}")
        return houses
