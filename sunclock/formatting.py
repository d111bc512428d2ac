"""Human-readable rendering of instants, angles and diagnostic reports."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Tuple

from .astro import julian_to_epoch

__all__ = [
    "MIN_DISPLAY_TIMESTAMP",
    "MAX_DISPLAY_TIMESTAMP",
    "format_timestamp",
    "format_degrees",
    "DiagnosticReport",
]

# Instants whose transit, sunrise/sunset and any ±24 h offset stay inside the
# years 1..9999 that ``datetime`` can render, for longitudes in (-180, 180].
MIN_DISPLAY_TIMESTAMP = -62135596800.0 + 4 * 86400.0
MAX_DISPLAY_TIMESTAMP = 253402300799.0 - 4 * 86400.0


def format_timestamp(instant: float, utc_offset_hours: float = 0.0) -> str:
    """Render *instant* truncated to whole seconds in a fixed UTC offset."""

    offset = timezone(timedelta(hours=utc_offset_hours))
    dt = datetime.fromtimestamp(int(instant), tz=offset)
    return dt.isoformat(sep=" ")


def format_degrees(degrees: float) -> str:
    """Render an angle as radians, degrees-minutes-seconds and decimal degrees.

    >>> format_degrees(27.6706)
    '∠0.483rad = ∠27°40′14″ = ∠27.671°'
    """

    radians = math.radians(degrees)
    total_seconds = math.floor(degrees * 3600.0)
    sign = -1 if total_seconds < 0 else 1
    magnitude = abs(total_seconds)
    d = sign * (magnitude // 3600)
    m = sign * ((magnitude // 60) % 60)
    s = sign * (magnitude % 60)
    return f"∠{radians:.3f}rad = ∠{d}°{m}′{s}″ = ∠{degrees:.3f}°"


class DiagnosticReport:
    """Observer that turns labeled intermediate values into report lines.

    Pass an instance as the ``observer`` of :func:`sunclock.astro.solar_events`
    and read :attr:`lines` afterwards. Instants are rendered in
    *utc_offset_hours*; labels without a layout entry are ignored.
    """

    # label -> (caption, symbol, kind)
    LAYOUT: Dict[str, Tuple[str, str, str]] = {
        "latitude": ("Latitude", "f", "degrees"),
        "longitude": ("Longitude", "l_w", "degrees"),
        "instant": ("Now", "ts", "timestamp"),
        "julian_date": ("Julian date", "j_date", "days3"),
        "julian_day": ("Julian day", "n", "days3"),
        "mean_solar_time": ("Mean solar time", "J_", "days9"),
        "solar_mean_anomaly": ("Solar mean anomaly", "M", "degrees"),
        "equation_of_center": ("Equation of the center", "C", "degrees"),
        "ecliptic_longitude": ("Ecliptic longitude", "L", "degrees"),
        "solar_transit": ("Solar transit time", "J_trans", "julian"),
        "hour_angle": ("Hour angle", "w0", "degrees"),
        "sunrise": ("Sunrise", "j_rise", "seconds"),
        "sunset": ("Sunset", "j_set", "seconds"),
    }

    def __init__(self, utc_offset_hours: float = 0.0) -> None:
        self.utc_offset_hours = utc_offset_hours
        self.lines: List[str] = []

    def __call__(self, label: str, value: float) -> None:
        try:
            caption, symbol, kind = self.LAYOUT[label]
        except KeyError:
            return
        self.lines.append(f"{caption:<22} {symbol:<7} = {self._render(kind, value)}")

    def _render(self, kind: str, value: float) -> str:
        if kind == "degrees":
            return format_degrees(value)
        if kind == "timestamp":
            return format_timestamp(value, self.utc_offset_hours)
        if kind == "days3":
            return f"{value:.3f} days"
        if kind == "days9":
            return f"{value:.9f} days"
        if kind == "julian":
            return f"{julian_to_epoch(value):.3f}"
        return f"{value:.3f}"
