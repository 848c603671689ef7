"""
houses.py
=========
Obliquity, sidereal time, the ASC/MC angles, and house cusps.

Supported systems:
  - Whole Sign
  - Equal House
  - Placidus

Placidus trisects the time each quadrant point spends between the horizon
and the meridian. Cusp 11, for example, is the ecliptic point whose distance
east of the meridian (in right ascension) is one third of its own diurnal
semi-arc. That condition is solved numerically per cusp:

    f(λ) = semi_arc(λ) - meridian_distance(λ) / fraction

with a three-tier fallback, because the semi-arc is undefined for points
that never rise or set (inside the polar circles):

  1. scan the quadrant for a sign change of f and bisect it;
  2. otherwise take the best sample by |f| if it is within LOOSE_TOLERANCE;
  3. otherwise trisect the quadrant in longitude.

Tiers 2 and 3 mark the cusp ``approximate``. Their error is unbounded near
the poles, where Placidus itself is undefined; they exist so a chart is
always produced.

Source: Meeus, "Astronomical Algorithms" Ch. 12, 13, 22.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from astrolabe.schemas.chart import HouseCusp, HouseSystem

from astro_engine.angles import deg_to_rad, norm360, rad_to_deg, shortest_delta
from astro_engine.zodiac import to_sign

logger = logging.getLogger(__name__)

J2000 = 2451545.0

SCAN_STEPS = 120
BEST_SAMPLE_STEPS = 240
MAX_BISECTION_ITER = 60
ROOT_TOLERANCE = 1e-6
LOOSE_TOLERANCE = 0.5


# ---------------------------------------------------------------------------
# Obliquity and sidereal time
# ---------------------------------------------------------------------------

def mean_obliquity(jd: float) -> float:
    """Mean obliquity of the ecliptic in degrees (IAU 1980, Meeus 22.2)."""
    T = (jd - J2000) / 36525.0
    return (
        23.0
        + 26.0 / 60.0
        + 21.448 / 3600.0
        - (46.8150 * T + 0.00059 * T * T - 0.001813 * T * T * T) / 3600.0
    )


def greenwich_mean_sidereal_time(jd: float) -> float:
    """Greenwich Mean Sidereal Time in hours (Meeus 12.4)."""
    T = (jd - J2000) / 36525.0
    theta = (
        280.46061837
        + 360.98564736629 * (jd - J2000)
        + 0.000387933 * T * T
        - T * T * T / 38710000.0
    )
    return norm360(theta) / 15.0


def local_sidereal_time(gst_hours: float, longitude: float) -> float:
    """Local sidereal time in degrees (the RAMC). Longitude is east-positive."""
    return norm360((gst_hours + longitude / 15.0) * 15.0)


# ---------------------------------------------------------------------------
# Angles
# ---------------------------------------------------------------------------

def compute_midheaven(lst: float, obliquity: float) -> float:
    """Ecliptic longitude culminating on the meridian.

    tan(MC) = tan(LST) / cos(ε), taken in the same half of the circle as LST.
    """
    ramc = deg_to_rad(lst)
    eps = deg_to_rad(obliquity)
    mc = math.atan2(math.sin(ramc), math.cos(ramc) * math.cos(eps))
    return norm360(rad_to_deg(mc))


def compute_ascendant(lst: float, latitude: float, obliquity: float) -> float:
    """Ecliptic longitude rising on the eastern horizon."""
    ramc = deg_to_rad(lst)
    eps = deg_to_rad(obliquity)
    phi = deg_to_rad(latitude)

    y = -math.cos(ramc)
    x = math.sin(eps) * math.tan(phi) + math.cos(eps) * math.sin(ramc)
    # The +180° always lands on the eastern horizon
    return norm360(rad_to_deg(math.atan2(y, x)) + 180.0)


def compute_angles(lst: float, latitude: float, obliquity: float) -> tuple[float, float]:
    """Return (ascendant, midheaven)."""
    return compute_ascendant(lst, latitude, obliquity), compute_midheaven(lst, obliquity)


# ---------------------------------------------------------------------------
# Ecliptic -> equatorial for points on the ecliptic
# ---------------------------------------------------------------------------

def declination(longitude: float, obliquity: float) -> float:
    lam = deg_to_rad(longitude)
    eps = deg_to_rad(obliquity)
    sin_dec = max(-1.0, min(1.0, math.sin(eps) * math.sin(lam)))
    return rad_to_deg(math.asin(sin_dec))


def right_ascension(longitude: float, obliquity: float) -> float:
    lam = deg_to_rad(longitude)
    eps = deg_to_rad(obliquity)
    return norm360(rad_to_deg(math.atan2(math.cos(eps) * math.sin(lam), math.cos(lam))))


def semi_arc(longitude: float, latitude: float, obliquity: float) -> float:
    """Diurnal semi-arc in degrees, or NaN for circumpolar points."""
    phi = deg_to_rad(latitude)
    dec = deg_to_rad(declination(longitude, obliquity))
    arg = -math.tan(phi) * math.tan(dec)
    if arg > 1.0 or arg < -1.0:
        return math.nan
    return rad_to_deg(math.acos(arg))


# ---------------------------------------------------------------------------
# Root finding
# ---------------------------------------------------------------------------

def _bisect(
    func: Callable[[float], float],
    left: float,
    right: float,
    f_left: float,
    max_iter: int,
    tolerance: float,
) -> float | None:
    if f_left == 0.0:
        return left
    for _ in range(max_iter):
        mid = (left + right) / 2.0
        f_mid = func(mid)
        if not math.isfinite(f_mid):
            return None
        if abs(f_mid) < tolerance or (right - left) / 2.0 < tolerance:
            return mid
        if f_left * f_mid <= 0.0:
            right = mid
        else:
            left, f_left = mid, f_mid
    return (left + right) / 2.0


def find_root(
    func: Callable[[float], float],
    start: float,
    end: float,
    *,
    scan_steps: int = SCAN_STEPS,
    best_steps: int = BEST_SAMPLE_STEPS,
    max_iter: int = MAX_BISECTION_ITER,
    tolerance: float = ROOT_TOLERANCE,
    loose_tolerance: float = LOOSE_TOLERANCE,
) -> tuple[float, bool] | None:
    """Find x in [start, end] with func(x) ~ 0.

    Returns (x, approximate) or None when neither the bracketed bisection nor
    the best sample gets within ``loose_tolerance``. ``func`` may return NaN
    where it is undefined.
    """
    width = end - start
    previous_x = start
    previous_f = func(start)
    for i in range(1, scan_steps + 1):
        x = start + width * i / scan_steps
        fx = func(x)
        if math.isfinite(previous_f) and math.isfinite(fx) and previous_f * fx <= 0.0:
            root = _bisect(func, previous_x, x, previous_f, max_iter, tolerance)
            # A jump in f (not a crossing) bisects to a point with a large residual
            if root is not None and abs(func(root)) <= loose_tolerance:
                return root, False
        previous_x, previous_f = x, fx

    best_x: float | None = None
    best_value = math.inf
    for i in range(best_steps + 1):
        x = start + width * i / best_steps
        value = abs(func(x))
        if math.isfinite(value) and value < best_value:
            best_x, best_value = x, value
    if best_x is not None and best_value <= loose_tolerance:
        return best_x, True
    return None


# ---------------------------------------------------------------------------
# House systems
# ---------------------------------------------------------------------------

def _cusp(house: int, position: float, approximate: bool = False) -> HouseCusp:
    return HouseCusp(
        house=house,
        position=position,
        zodiac_sign=to_sign(position),
        approximate=approximate,
    )


def whole_sign_cusps(ascendant: float) -> list[HouseCusp]:
    """House 1 = the whole sign containing the Ascendant."""
    sign_start = math.floor(norm360(ascendant) / 30.0) * 30.0
    return [_cusp(i + 1, norm360(sign_start + 30.0 * i)) for i in range(12)]


def equal_cusps(ascendant: float) -> list[HouseCusp]:
    """House 1 begins exactly at the Ascendant, each house spans 30°."""
    return [_cusp(i + 1, norm360(ascendant + 30.0 * i)) for i in range(12)]


@dataclass(frozen=True)
class PlacidusCusp:
    """One intermediate Placidus cusp.

    ``fraction`` is the share of the semi-arc between the cusp and its
    meridian anchor (MC, or IC when ``nocturnal``). ``direction`` is +1 when
    the cusp's right ascension is greater than the anchor's. ``step`` is its
    position inside the quadrant, used by the even-spacing fallback.
    """

    house: int
    fraction: float
    nocturnal: bool
    direction: int
    step: int


# Quadrants in increasing longitude: (from, to, cusps inside)
PLACIDUS_QUADRANTS: tuple[tuple[str, str, tuple[PlacidusCusp, PlacidusCusp]], ...] = (
    ("mc", "asc", (PlacidusCusp(11, 1 / 3, False, +1, 1), PlacidusCusp(12, 2 / 3, False, +1, 2))),
    ("asc", "ic", (PlacidusCusp(2, 2 / 3, True, -1, 1), PlacidusCusp(3, 1 / 3, True, -1, 2))),
    ("ic", "dsc", (PlacidusCusp(5, 1 / 3, True, +1, 1), PlacidusCusp(6, 2 / 3, True, +1, 2))),
    ("dsc", "mc", (PlacidusCusp(8, 2 / 3, False, -1, 1), PlacidusCusp(9, 1 / 3, False, -1, 2))),
)


def placidus_residual(
    longitude: float,
    cusp: PlacidusCusp,
    ramc: float,
    latitude: float,
    obliquity: float,
) -> float:
    """Semi-arc of ``longitude`` minus the semi-arc its meridian distance implies."""
    arc = semi_arc(longitude, latitude, obliquity)
    if math.isnan(arc):
        return math.nan
    anchor = ramc
    if cusp.nocturnal:
        arc = 180.0 - arc
        anchor = ramc + 180.0
    distance = cusp.direction * shortest_delta(anchor, right_ascension(longitude, obliquity))
    return arc - distance / cusp.fraction


def placidus_cusps(
    ascendant: float,
    midheaven: float,
    latitude: float,
    obliquity: float,
) -> list[HouseCusp]:
    """Placidus cusps; 1, 4, 7, 10 are the ASC, IC, DSC and MC."""
    asc = norm360(ascendant)
    mc = norm360(midheaven)
    anchors = {
        "asc": asc,
        "mc": mc,
        "ic": norm360(mc + 180.0),
        "dsc": norm360(asc + 180.0),
    }
    ramc = right_ascension(mc, obliquity)

    cusps: dict[int, HouseCusp] = {
        1: _cusp(1, anchors["asc"]),
        4: _cusp(4, anchors["ic"]),
        7: _cusp(7, anchors["dsc"]),
        10: _cusp(10, anchors["mc"]),
    }

    for start_key, end_key, quadrant in PLACIDUS_QUADRANTS:
        start = anchors[start_key]
        end = anchors[end_key]
        if end <= start:
            end += 360.0

        for target in quadrant:
            found = find_root(
                lambda lon, target=target: placidus_residual(lon, target, ramc, latitude, obliquity),
                start,
                end,
            )
            if found is None:
                position = norm360(start + (end - start) * target.step / 3.0)
                logger.debug("Placidus cusp %d undefined at latitude %.4f, trisecting quadrant", target.house, latitude)
                cusps[target.house] = _cusp(target.house, position, approximate=True)
                continue

            longitude, approximate = found
            if approximate:
                logger.debug("Placidus cusp %d taken from best sample at latitude %.4f", target.house, latitude)
            cusps[target.house] = _cusp(target.house, norm360(longitude), approximate=approximate)

    return [cusps[house] for house in range(1, 13)]


def build_houses(
    system: HouseSystem | str,
    ascendant: float,
    midheaven: float,
    latitude: float,
    obliquity: float,
) -> list[HouseCusp]:
    """Build the 12 cusps for ``system``."""
    system = HouseSystem(system)
    if system is HouseSystem.WHOLE_SIGN:
        return whole_sign_cusps(ascendant)
    if system is HouseSystem.EQUAL:
        return equal_cusps(ascendant)
    return placidus_cusps(ascendant, midheaven, latitude, obliquity)
