"""Aspect detection and orb calculations."""

from __future__ import annotations

from collections.abc import Sequence

from astrolabe.schemas.chart import Aspect, PlanetPosition

from astro_engine.angles import norm360
from astro_engine.bodies import ASPECTS, EXACT_ORB


def aspect_orb(angle: float, target: float) -> float:
    """Distance from ``angle`` to ``target`` measured either way round."""
    return min(abs(angle - target), abs(angle - (360.0 - target)))


def classify_aspect(angle: float) -> tuple[str, float] | None:
    """Return (aspect type, orb) for a separation, or None if nothing is in orb."""
    for name, definition in ASPECTS.items():
        orb = aspect_orb(angle, definition.angle)
        if orb <= definition.orb:
            return name, orb
    return None


def find_aspects(planets: Sequence[PlanetPosition]) -> list[Aspect]:
    """Find aspects for every pair, ``planet1`` preceding ``planet2`` in input order."""
    aspects_found = []

    for i, p1 in enumerate(planets):
        for p2 in planets[i + 1:]:
            angle = norm360(p2.longitude - p1.longitude)
            match = classify_aspect(angle)
            if match is None:
                continue

            aspect_type, orb = match
            aspects_found.append(
                Aspect(
                    planet1=p1.name,
                    planet2=p2.name,
                    angle=angle,
                    type=aspect_type,
                    orb=orb,
                    exact=orb < EXACT_ORB,
                    influence=ASPECTS[aspect_type].influence,
                )
            )

    return aspects_found
