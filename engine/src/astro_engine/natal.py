"""Natal chart calculator - birth chart positions, houses, and aspects."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from astrolabe.config import EphemerisConfig, Settings, get_settings
from astrolabe.schemas.chart import (
    Aspect,
    ChartLocation,
    HouseSystem,
    NatalChart,
    PlanetPosition,
    ZodiacSign,
)

from astro_engine.aspects import find_aspects
from astro_engine.errors import InvalidCoordinatesError, NotInitializedError
from astro_engine.houses import (
    build_houses,
    compute_angles,
    greenwich_mean_sidereal_time,
    local_sidereal_time,
    mean_obliquity,
)
from astro_engine.planets import DEFAULT_SPEED_STEP_DAYS, calculate_positions
from astro_engine.provider import EphemerisProvider, SwissEphemerisProvider, as_utc, julian_day
from astro_engine.zodiac import to_sign

logger = logging.getLogger(__name__)

TROPICAL_YEAR_DAYS = 365.2422


def _validate_coordinates(latitude: float, longitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise InvalidCoordinatesError(f"latitude {latitude} outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinatesError(f"longitude {longitude} outside [-180, 180]")


class ChartCalculator:
    """Sequences positions, angles, houses and aspects into a natal chart.

    ``initialize()`` must be awaited once before any calculation. After that
    the instance holds no per-call state and can be shared between threads
    and tasks.
    """

    def __init__(
        self,
        provider: EphemerisProvider,
        house_system: HouseSystem | str = HouseSystem.WHOLE_SIGN,
        speed_step_days: float = DEFAULT_SPEED_STEP_DAYS,
    ) -> None:
        self._provider = provider
        self._house_system = HouseSystem(house_system)
        self._speed_step_days = speed_step_days
        self._init_lock = asyncio.Lock()
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ChartCalculator:
        settings = settings or get_settings()
        provider = SwissEphemerisProvider(EphemerisConfig.from_settings(settings))
        return cls(
            provider,
            house_system=settings.house_system,
            speed_step_days=settings.speed_step_days,
        )

    @property
    def house_system(self) -> HouseSystem:
        return self._house_system

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Prepare the ephemeris provider. Safe to call more than once."""
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            await self._provider.initialize()
            self._initialized = True

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("ChartCalculator.initialize() has not completed")

    def _positions(self, when: datetime) -> list[PlanetPosition]:
        return calculate_positions(self._provider, when, step_days=self._speed_step_days)

    def calculate_natal_chart(
        self,
        when: datetime,
        latitude: float,
        longitude: float,
        timezone_offset: float = 0.0,
        house_system: HouseSystem | str | None = None,
    ) -> NatalChart:
        """Calculate a full natal chart for a UTC instant.

        ``timezone_offset`` (hours) is stored on the chart for display only;
        ``when`` must already be the UTC birth instant. Naive datetimes are
        taken as UTC.
        """
        self._require_initialized()
        _validate_coordinates(latitude, longitude)
        system = HouseSystem(house_system) if house_system is not None else self._house_system

        when = as_utc(when)
        jd = julian_day(when)

        planets = self._positions(when)

        obliquity = self._provider.obliquity(jd)
        if obliquity is None:
            obliquity = mean_obliquity(jd)
        gst = self._provider.sidereal_time(jd)
        if gst is None:
            gst = greenwich_mean_sidereal_time(jd)

        lst = local_sidereal_time(gst, longitude)
        ascendant, midheaven = compute_angles(lst, latitude, obliquity)
        houses = build_houses(system, ascendant, midheaven, latitude, obliquity)

        logger.debug(
            "Natal chart %s lat=%.4f lon=%.4f: ASC=%.4f MC=%.4f (%s)",
            when.isoformat(),
            latitude,
            longitude,
            ascendant,
            midheaven,
            system.value,
        )

        return NatalChart(
            planets=planets,
            houses=houses,
            ascendant=ascendant,
            midheaven=midheaven,
            date=when,
            location=ChartLocation(latitude=latitude, longitude=longitude, timezone=timezone_offset),
            house_system=system,
        )

    def calculate_aspects(self, planets: Sequence[PlanetPosition]) -> list[Aspect]:
        """Aspects between every pair of ``planets``."""
        return find_aspects(planets)

    def calculate_transits(self, natal_chart: NatalChart, when: datetime) -> list[PlanetPosition]:
        """Current positions of the tracked bodies, named ``Transit <body>``."""
        self._require_initialized()
        return [
            position.model_copy(update={"name": f"Transit {position.name}"})
            for position in self._positions(as_utc(when))
        ]

    def calculate_progressions(self, natal_chart: NatalChart, when: datetime) -> list[PlanetPosition]:
        """Secondary progressions: each day after birth stands for a year of life."""
        self._require_initialized()
        birth = as_utc(natal_chart.date)
        age_days = (as_utc(when) - birth).total_seconds() / 86400.0
        progressed = birth + timedelta(days=age_days / TROPICAL_YEAR_DAYS)
        return [
            position.model_copy(update={"name": f"Progressed {position.name}"})
            for position in self._positions(progressed)
        ]

    def degrees_to_sign(self, longitude: float) -> ZodiacSign:
        return to_sign(longitude)
