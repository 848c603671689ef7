"""Planet positions with finite-difference speed."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from astrolabe.schemas.chart import PlanetPosition

from astro_engine.angles import norm360, shortest_delta
from astro_engine.bodies import TRACKED_BODIES, Body, parse_body
from astro_engine.provider import EphemerisProvider
from astro_engine.zodiac import to_sign

logger = logging.getLogger(__name__)

DEFAULT_SPEED_STEP_DAYS = 1.0 / 24.0


def longitude_speed(
    provider: EphemerisProvider,
    when: datetime,
    body: Body,
    longitude: float,
    step_days: float = DEFAULT_SPEED_STEP_DAYS,
) -> float:
    """Longitudinal speed in degrees/day by forward difference.

    Uses the shortest signed delta so a 359° -> 1° step reads as +2°.
    """
    later, _, _ = provider.position(when + timedelta(days=step_days), body)
    return shortest_delta(longitude, later) / step_days


def calculate_position(
    provider: EphemerisProvider,
    when: datetime,
    body: Body | str,
    step_days: float = DEFAULT_SPEED_STEP_DAYS,
) -> PlanetPosition:
    """Calculate position for a single body."""
    body = parse_body(body)
    longitude, latitude, distance = provider.position(when, body)
    speed = longitude_speed(provider, when, body, longitude, step_days)

    return PlanetPosition(
        name=body.value,
        longitude=norm360(longitude),
        latitude=latitude,
        distance=distance,
        speed=speed,
        retrograde=speed < 0,
        zodiac_sign=to_sign(longitude),
    )


def calculate_positions(
    provider: EphemerisProvider,
    when: datetime,
    bodies: Iterable[Body | str] = TRACKED_BODIES,
    step_days: float = DEFAULT_SPEED_STEP_DAYS,
) -> list[PlanetPosition]:
    """Calculate every requested body, in the order given."""
    positions = [calculate_position(provider, when, body, step_days) for body in bodies]
    logger.debug("Calculated %d positions for %s", len(positions), when.isoformat())
    return positions
