"""Tests for aspect detection."""

from __future__ import annotations

import pytest
from astrolabe.schemas.chart import PlanetPosition

from astro_engine.aspects import aspect_orb, classify_aspect, find_aspects
from astro_engine.zodiac import to_sign


def _planet(name: str, longitude: float) -> PlanetPosition:
    return PlanetPosition(
        name=name,
        longitude=longitude,
        latitude=0.0,
        distance=1.0,
        speed=1.0,
        retrograde=False,
        zodiac_sign=to_sign(longitude),
    )


def test_aspect_orb_measures_both_ways_round():
    assert aspect_orb(120.0, 120.0) == 0.0
    assert aspect_orb(240.0, 120.0) == 0.0
    assert aspect_orb(185.0, 180.0) == 5.0
    assert aspect_orb(352.0, 0.0) == 8.0


def test_exact_trine():
    """Test that a 120° separation is an exact trine."""
    aspects = find_aspects([_planet("Sun", 10.0), _planet("Moon", 130.0)])

    assert len(aspects) == 1
    aspect = aspects[0]
    assert aspect.type == "trine"
    assert aspect.orb == 0.0
    assert aspect.exact is True
    assert aspect.influence == "positive"
    assert aspect.angle == pytest.approx(120.0)


def test_conjunction_across_zero_aries():
    """Test that the conjunction orb wraps around 0°."""
    aspects = find_aspects([_planet("Venus", 355.0), _planet("Mars", 3.0)])

    assert len(aspects) == 1
    assert aspects[0].type == "conjunction"
    assert aspects[0].orb == pytest.approx(8.0)
    assert aspects[0].exact is False
    assert aspects[0].influence == "neutral"


def test_no_aspect_outside_every_orb():
    assert find_aspects([_planet("Sun", 0.0), _planet("Moon", 100.0)]) == []
    assert classify_aspect(100.0) is None


def test_reflex_angle_uses_supplement():
    """Test that separations above 180° report the orb from the mirrored angle."""
    aspects = find_aspects([_planet("Sun", 10.0), _planet("Saturn", 195.0)])

    assert aspects[0].type == "opposition"
    assert aspects[0].orb == pytest.approx(5.0)
    assert aspects[0].angle == pytest.approx(185.0)
    assert aspects[0].influence == "negative"

    assert classify_aspect(211.0) == ("quincunx", pytest.approx(1.0))


def test_classification_is_symmetric():
    forward = find_aspects([_planet("Sun", 10.0), _planet("Moon", 130.0)])
    backward = find_aspects([_planet("Moon", 130.0), _planet("Sun", 10.0)])

    assert forward[0].type == backward[0].type
    assert forward[0].orb == backward[0].orb
    assert backward[0].angle == pytest.approx(240.0)


def test_near_exact_opposition():
    aspect = find_aspects([_planet("Sun", 280.0), _planet("Moon", 100.3)])[0]

    assert aspect.type == "opposition"
    assert aspect.orb == pytest.approx(0.3)
    assert aspect.exact is True


@pytest.mark.parametrize(
    ("angle", "expected"),
    [
        (0.0, "conjunction"),
        (63.5, "sextile"),
        (84.0, "square"),
        (126.0, "trine"),
        (152.9, "quincunx"),
        (172.0, "opposition"),
    ],
)
def test_classify_each_aspect_type(angle, expected):
    name, orb = classify_aspect(angle)
    assert name == expected
    assert orb >= 0.0


def test_pairs_keep_input_order():
    planets = [_planet("Sun", 0.0), _planet("Moon", 90.0), _planet("Mars", 180.0), _planet("Venus", 0.5)]

    aspects = find_aspects(planets)
    order = [p.name for p in planets]

    assert len(aspects) == 6
    for aspect in aspects:
        assert order.index(aspect.planet1) < order.index(aspect.planet2)
        assert 0.0 <= aspect.angle < 360.0
        assert aspect.orb >= 0.0
