"""Command-line entry point: python -m astro_engine."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime

from astrolabe.config import get_settings
from astrolabe.schemas.chart import HouseSystem

from astro_engine.errors import AstroEngineError
from astro_engine.natal import ChartCalculator

logger = logging.getLogger("astro_engine")


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 datetime: {value!r}") from exc


def _parse_house_system(value: str) -> HouseSystem:
    try:
        return HouseSystem(value)
    except ValueError as exc:
        choices = ", ".join(s.value for s in HouseSystem)
        raise argparse.ArgumentTypeError(f"unknown house system {value!r} (choose from {choices})") from exc


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calculate a natal chart and print it as JSON.")
    parser.add_argument(
        "--date",
        type=_parse_datetime,
        required=True,
        help="Birth instant in ISO 8601; values without an offset are taken as UTC.",
    )
    parser.add_argument("--lat", type=float, required=True, help="Latitude in degrees, north positive.")
    parser.add_argument("--lon", type=float, required=True, help="Longitude in degrees, east positive.")
    parser.add_argument(
        "--tz",
        type=float,
        default=0.0,
        help="Timezone offset in hours, stored on the chart for display (default: 0).",
    )
    parser.add_argument(
        "--house-system",
        type=_parse_house_system,
        default=None,
        help="whole_sign, equal or placidus (default: ASTRO_HOUSE_SYSTEM).",
    )
    parser.add_argument("--aspects", action="store_true", help="Include planet aspects in the output.")
    return parser


async def _run(args: argparse.Namespace) -> dict:
    calculator = ChartCalculator.from_settings()
    await calculator.initialize()

    chart = calculator.calculate_natal_chart(
        args.date,
        args.lat,
        args.lon,
        timezone_offset=args.tz,
        house_system=args.house_system,
    )
    output = {"chart": chart.model_dump(mode="json")}
    if args.aspects:
        output["aspects"] = [a.model_dump(mode="json") for a in calculator.calculate_aspects(chart.planets)]
    return output


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        output = asyncio.run(_run(args))
    except AstroEngineError as exc:
        logger.error("Chart calculation failed: %s", exc)
        return 1

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
