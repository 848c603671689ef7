"""Longitude to zodiac sign conversion and display helpers."""

from __future__ import annotations

import math

from astrolabe.schemas.chart import ZodiacSign

from astro_engine.angles import norm360
from astro_engine.bodies import SIGNS

SIGN_SYMBOLS: dict[str, str] = {
    "Aries": "♈",
    "Taurus": "♉",
    "Gemini": "♊",
    "Cancer": "♋",
    "Leo": "♌",
    "Virgo": "♍",
    "Libra": "♎",
    "Scorpio": "♏",
    "Sagittarius": "♐",
    "Capricorn": "♑",
    "Aquarius": "♒",
    "Pisces": "♓",
}


def to_sign(longitude: float) -> ZodiacSign:
    """Convert ecliptic longitude to sign, degree, minute and second.

    Degree and minute are floored, the second is rounded. A rounded second of
    60 carries upward; a carry that would leave the sign is clamped to
    29°59'59" so the sign always matches ``floor(longitude / 30)``.
    """
    longitude = norm360(longitude)
    sign_index = int(longitude // 30.0)
    in_sign = longitude - sign_index * 30.0

    degree = math.floor(in_sign)
    minutes = (in_sign - degree) * 60.0
    minute = math.floor(minutes)
    second = round((minutes - minute) * 60.0)

    if second == 60:
        second = 0
        minute += 1
    if minute == 60:
        minute = 0
        degree += 1
    if degree >= 30:
        degree, minute, second = 29, 59, 59

    return ZodiacSign(sign=SIGNS[sign_index], degree=degree, minute=minute, second=second)


def sign_symbol(sign: str) -> str:
    return SIGN_SYMBOLS.get(sign, "")


def format_position(zodiac_sign: ZodiacSign) -> str:
    """Render a placement like ``10°22'5" Capricorn ♑``."""
    text = f"{zodiac_sign.degree}°{zodiac_sign.minute}'{zodiac_sign.second}\" {zodiac_sign.sign}"
    symbol = sign_symbol(zodiac_sign.sign)
    return f"{text} {symbol}" if symbol else text
