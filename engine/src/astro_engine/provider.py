"""Ephemeris provider contract and the Swiss Ephemeris implementation."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime

import swisseph as swe
from astrolabe.config import EphemerisConfig

from astro_engine.bodies import BODY_IDS, Body, parse_body
from astro_engine.errors import EphemerisError, NotInitializedError

logger = logging.getLogger(__name__)


def as_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def julian_day(dt: datetime) -> float:
    """Convert datetime to Julian Day number (UT)."""
    utc = as_utc(dt)
    return swe.julday(
        utc.year,
        utc.month,
        utc.day,
        utc.hour + utc.minute / 60.0 + (utc.second + utc.microsecond / 1e6) / 3600.0,
    )


class EphemerisProvider(ABC):
    """Source of raw geocentric ecliptic positions.

    Implementations must be initialized once before ``position`` is called.
    ``obliquity`` and ``sidereal_time`` may return ``None`` when the provider
    has no better value than the standard polynomials.
    """

    def __init__(self) -> None:
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        if self._initialized:
            return
        await self._setup()
        self._initialized = True

    async def _setup(self) -> None:
        """Provider-specific one-time setup."""

    def position(self, when: datetime, body: Body | str) -> tuple[float, float, float]:
        """Return (longitude, latitude, distance) for ``body`` at ``when``."""
        if not self._initialized:
            raise NotInitializedError("Ephemeris provider not initialized")
        return self._position(as_utc(when), parse_body(body))

    @abstractmethod
    def _position(self, when: datetime, body: Body) -> tuple[float, float, float]:
        ...

    def obliquity(self, jd_ut: float) -> float | None:
        """True obliquity of the ecliptic in degrees, if the provider knows it."""
        return None

    def sidereal_time(self, jd_ut: float) -> float | None:
        """Greenwich sidereal time in hours, if the provider knows it."""
        return None


class SwissEphemerisProvider(EphemerisProvider):
    """Positions from pyswisseph, falling back to the Moshier ephemeris."""

    def __init__(self, config: EphemerisConfig | None = None) -> None:
        super().__init__()
        self.config = config or EphemerisConfig()
        # swisseph keeps global state in the C library
        self._lock = threading.Lock()

    async def _setup(self) -> None:
        with self._lock:
            swe.set_ephe_path(self.config.ephe_path)
        logger.info("Swiss Ephemeris initialized (path=%s)", self.config.ephe_path or "built-in")

    def _position(self, when: datetime, body: Body) -> tuple[float, float, float]:
        jd = julian_day(when)
        body_id = BODY_IDS[body]
        flags = swe.FLG_SWIEPH | self.config.flags

        with self._lock:
            try:
                result, _ = swe.calc_ut(jd, body_id, flags)
            except swe.Error as exc:
                logger.warning("swisseph failed for %s, retrying with Moshier: %s", body.value, exc)
                try:
                    result, _ = swe.calc_ut(jd, body_id, swe.FLG_MOSEPH | self.config.flags)
                except swe.Error as moshier_exc:
                    raise EphemerisError(f"{body.value} unavailable: {moshier_exc}") from moshier_exc

        longitude, latitude, distance = result[0], result[1], result[2]
        return longitude, latitude, distance

    def obliquity(self, jd_ut: float) -> float | None:
        with self._lock:
            result, _ = swe.calc_ut(jd_ut, swe.ECL_NUT)
        return result[0]

    def sidereal_time(self, jd_ut: float) -> float | None:
        with self._lock:
            return swe.sidtime(jd_ut)
