"""Angle helpers shared by every calculation."""

from __future__ import annotations

import math


def norm360(deg: float) -> float:
    """Normalize degrees to the [0, 360) range."""
    result = deg % 360.0
    # -1e-15 % 360.0 == 360.0 in floating point
    if result >= 360.0:
        result = 0.0
    return result


def shortest_delta(a: float, b: float) -> float:
    """Signed shortest rotation from ``a`` to ``b``, in (-180, 180]."""
    delta = (b - a) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def angular_distance(a: float, b: float) -> float:
    """Calculate the shortest angular distance between two longitudes."""
    return abs(shortest_delta(a, b))


def deg_to_rad(deg: float) -> float:
    return deg * math.pi / 180.0


def rad_to_deg(rad: float) -> float:
    return rad * 180.0 / math.pi
