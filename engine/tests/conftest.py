"""Shared fixtures for chart engine tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest
from astrolabe.config import reset_settings_cache

from astro_engine.bodies import Body
from astro_engine.errors import EphemerisError
from astro_engine.natal import ChartCalculator
from astro_engine.provider import EphemerisProvider

EPOCH = datetime(2000, 1, 1, 12, 0, tzinfo=UTC)

# Roughly the sky at J2000, moving at constant rates
BASE_LONGITUDES: dict[Body, float] = {
    Body.SUN: 280.0,
    Body.MOON: 223.0,
    Body.MERCURY: 271.0,
    Body.VENUS: 241.0,
    Body.MARS: 327.0,
    Body.JUPITER: 25.0,
    Body.SATURN: 40.0,
    Body.URANUS: 314.0,
    Body.NEPTUNE: 303.0,
    Body.PLUTO: 251.0,
}

BASE_SPEEDS: dict[Body, float] = {
    Body.SUN: 1.0,
    Body.MOON: 13.2,
    Body.MERCURY: 1.5,
    Body.VENUS: 1.2,
    Body.MARS: 0.7,
    Body.JUPITER: -0.1,
    Body.SATURN: 0.05,
    Body.URANUS: 0.04,
    Body.NEPTUNE: 0.03,
    Body.PLUTO: 0.02,
}


class FakeProvider(EphemerisProvider):
    """Deterministic provider with bodies moving linearly from EPOCH."""

    def __init__(
        self,
        longitudes: dict[Body, float] | None = None,
        speeds: dict[Body, float] | None = None,
        fail_for: set[Body] | None = None,
    ) -> None:
        super().__init__()
        self.longitudes = {**BASE_LONGITUDES, **(longitudes or {})}
        self.speeds = {**BASE_SPEEDS, **(speeds or {})}
        self.fail_for = fail_for or set()
        self.setup_calls = 0
        self.calls: list[tuple[datetime, Body]] = []

    async def _setup(self) -> None:
        self.setup_calls += 1

    def _position(self, when: datetime, body: Body) -> tuple[float, float, float]:
        self.calls.append((when, body))
        if body in self.fail_for:
            raise EphemerisError(f"{body.value} unavailable: test failure")
        days = (when - EPOCH).total_seconds() / 86400.0
        longitude = (self.longitudes[body] + self.speeds[body] * days) % 360.0
        return longitude, 0.5, 1.0


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def calculator(fake_provider: FakeProvider) -> ChartCalculator:
    calc = ChartCalculator(fake_provider)
    asyncio.run(calc.initialize())
    return calc
