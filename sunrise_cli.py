"""Command-line entry point printing today's sunrise and sunset."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import List, Optional

from sunclock.astro import SolarCalculationError, solar_events
from sunclock.config import ConfigurationError, resolve_location
from sunclock.formatting import (
    MAX_DISPLAY_TIMESTAMP,
    MIN_DISPLAY_TIMESTAMP,
    DiagnosticReport,
    format_timestamp,
)

LOGGER = logging.getLogger("sunclock-cli")


def _check_displayable(instant: float, text: str) -> float:
    if not MIN_DISPLAY_TIMESTAMP <= instant <= MAX_DISPLAY_TIMESTAMP:
        raise argparse.ArgumentTypeError(f"instant outside years 1..9999: {text!r}")
    return instant


def _parse_timestamp(value: str) -> float:
    try:
        instant = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid timestamp: {value!r}") from exc
    return _check_displayable(instant, value)


def _parse_instant(value: str) -> float:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""

    try:
        dt = datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 date: {value!r}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return _check_displayable(dt.timestamp(), value)


def _parse_offset(value: str) -> float:
    try:
        hours = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid UTC offset: {value!r}") from exc
    if not -24.0 < hours < 24.0:
        raise argparse.ArgumentTypeError(f"UTC offset must be within ±24 hours: {value!r}")
    return hours


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sunclock",
        description="Compute sunrise and sunset for an observer location.",
    )
    parser.add_argument("--lat", type=float, default=None, help="latitude in degrees (north positive)")
    parser.add_argument("--lon", type=float, default=None, help="longitude in degrees (east positive)")
    parser.add_argument("--elev", type=float, default=None, help="elevation above sea level in meters")
    when = parser.add_mutually_exclusive_group()
    when.add_argument("--timestamp", type=_parse_timestamp, default=None, help="seconds since the Unix epoch")
    when.add_argument("--date", type=_parse_instant, default=None, help="ISO-8601 date or datetime (UTC if naive)")
    parser.add_argument("--tz", type=_parse_offset, default=None, help="UTC offset in hours used for display")
    parser.add_argument(
        "--corrected-transit",
        action="store_true",
        help="use radians for the 2L term of the solar transit equation",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="print only sunrise and sunset")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    args = build_parser().parse_args(argv)

    try:
        location = resolve_location()
    except ConfigurationError as exc:
        LOGGER.error(json.dumps({"event": "configuration_failed", "error": str(exc)}))
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    lat = location.latitude if args.lat is None else args.lat
    lon = location.longitude if args.lon is None else args.lon
    elev = location.elevation if args.elev is None else args.elev
    offset = location.utc_offset_hours if args.tz is None else args.tz
    if args.timestamp is not None:
        instant = args.timestamp
    elif args.date is not None:
        instant = args.date
    else:
        instant = float(int(time.time()))

    report = DiagnosticReport(utc_offset_hours=offset)
    try:
        events = solar_events(
            instant,
            lat,
            lon,
            elev,
            observer=None if args.quiet else report,
            corrected_transit=args.corrected_transit,
        )
    except SolarCalculationError as exc:
        for line in report.lines:
            print(line)
        print(f"Error calculating sunrise/sunset: {exc}", file=sys.stderr)
        return 1
    except (ValueError, OverflowError) as exc:
        # Raised by the report while rendering an instant outside years 1..9999.
        print(f"Error displaying sunrise/sunset: {exc}", file=sys.stderr)
        return 1

    try:
        sunrise = format_timestamp(events.sunrise, offset)
        sunset = format_timestamp(events.sunset, offset)
    except (ValueError, OverflowError) as exc:
        print(f"Error displaying sunrise/sunset: {exc}", file=sys.stderr)
        return 1

    for line in report.lines:
        print(line)
    print(f"Sunrise: {sunrise}")
    print(f"Sunset: {sunset}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
