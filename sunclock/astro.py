"""Closed-form sunrise and sunset computation based on Julian-date mean solar time."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

__all__ = [
    "SolarEvents",
    "SolarCalculationError",
    "InvalidInputError",
    "SunNeverRisesOrSetsError",
    "epoch_to_julian",
    "julian_to_epoch",
    "solar_events",
    "compute_sunrise_sunset",
]

SECONDS_PER_DAY = 86400.0
JULIAN_UNIX_EPOCH = 2440587.5  # Julian date of 1970-01-01T00:00:00Z.
J2000 = 2451545.0
LEAP_YEAR_DAY_FRACTION = 0.0008
ADDED_SECONDS_FRACTION = 69.184 / SECONDS_PER_DAY

MEAN_ANOMALY_AT_EPOCH_DEG = 357.5291
MEAN_ANOMALY_RATE_DEG = 0.98560028
EQUATION_OF_CENTER_COEFFS = (1.9148, 0.02, 0.0003)
PERIHELION_ARGUMENT_DEG = 102.9372
TRANSIT_ANOMALY_COEFF = 0.0053
TRANSIT_LONGITUDE_COEFF = 0.0069

OBLIQUITY_DEG = 23.4397
REFRACTION_DEG = -0.833
ELEVATION_DIP_COEFFICIENT = 2.076

Observer = Callable[[str, float], None]


class SolarCalculationError(ValueError):
    """Base class for failures of the sunrise/sunset computation."""


class InvalidInputError(SolarCalculationError):
    """Raised when an input lies outside the domain of the formula."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class SunNeverRisesOrSetsError(SolarCalculationError):
    """Raised when the sun does not cross the adjusted horizon on the computed day."""

    def __init__(self, hour_angle_cosine: float) -> None:
        kind = "polar day" if hour_angle_cosine < -1.0 else "polar night"
        super().__init__(
            f"Sun never rises or sets ({kind}): hour angle cosine {hour_angle_cosine:.6f}"
        )
        self.hour_angle_cosine = hour_angle_cosine

    @property
    def polar_day(self) -> bool:
        return self.hour_angle_cosine < -1.0

    @property
    def polar_night(self) -> bool:
        return self.hour_angle_cosine > 1.0


@dataclass(frozen=True)
class SolarEvents:
    """Sunrise, sunset and every intermediate quantity of one computation.

    Angles are in degrees, Julian quantities in days and instants in seconds
    since the Unix epoch.
    """

    instant: float
    latitude: float
    longitude: float
    elevation: float
    julian_date: float
    julian_day: int
    mean_solar_time: float
    solar_mean_anomaly: float
    equation_of_center: float
    ecliptic_longitude: float
    solar_transit: float
    sin_declination: float
    cos_declination: float
    hour_angle_cosine: float
    hour_angle: float
    sunrise: float
    sunset: float

    @property
    def transit(self) -> float:
        """Local solar noon as seconds since the Unix epoch."""

        return julian_to_epoch(self.solar_transit)

    @property
    def day_length(self) -> float:
        return self.sunset - self.sunrise


def epoch_to_julian(instant: float) -> float:
    """Convert seconds since the Unix epoch into a Julian date."""

    return instant / SECONDS_PER_DAY + JULIAN_UNIX_EPOCH


def julian_to_epoch(julian_date: float) -> float:
    """Convert a Julian date into seconds since the Unix epoch."""

    return (julian_date - JULIAN_UNIX_EPOCH) * SECONDS_PER_DAY


def _validate(instant: float, latitude: float, longitude: float, elevation: float) -> None:
    for field, value in (
        ("instant", instant),
        ("latitude", latitude),
        ("longitude", longitude),
        ("elevation", elevation),
    ):
        if not math.isfinite(value):
            raise InvalidInputError(field, f"must be a finite number, got {value!r}")
    if not -90.0 < latitude < 90.0:
        raise InvalidInputError("latitude", f"must lie strictly within (-90, 90), got {latitude}")
    if elevation < 0.0:
        raise InvalidInputError("elevation", f"must be >= 0 meters, got {elevation}")


def _noop(label: str, value: float) -> None:
    return None


def solar_events(
    instant: float,
    latitude: float,
    longitude: float,
    elevation: float = 0.0,
    *,
    observer: Optional[Observer] = None,
    corrected_transit: bool = False,
) -> SolarEvents:
    """Compute sunrise and sunset for the solar day selected by *instant*.

    Parameters
    ----------
    instant:
        Seconds since the Unix epoch. The day number is the ceiling of the
        instant's offset from J2000, so the transit of that calendar Julian
        day is targeted.
    latitude, longitude:
        Geographic coordinates in degrees (north and east positive).
        Latitude must lie strictly within (-90, 90).
    elevation:
        Observer elevation above sea level in meters, at least zero.
    observer:
        Optional callable invoked as ``observer(label, value)`` for the inputs
        and each intermediate quantity, in computation order.
    corrected_transit:
        When true, the ``sin(2L)`` term of the transit equation receives
        ``2L`` in radians. The default passes the degree value straight to
        the sine, which is the reference behaviour.

    Returns
    -------
    SolarEvents
        Sunrise and sunset instants plus the intermediate quantities.

    Raises
    ------
    InvalidInputError
        If an input is not finite, latitude is at or beyond a pole, or
        elevation is negative.
    SunNeverRisesOrSetsError
        If the hour-angle cosine falls outside [-1, 1].
    """

    _validate(instant, latitude, longitude, elevation)
    emit = observer if observer is not None else _noop

    emit("latitude", latitude)
    emit("longitude", longitude)
    emit("instant", instant)

    julian_date = epoch_to_julian(instant)
    emit("julian_date", julian_date)

    julian_day = math.ceil(
        julian_date - (J2000 + LEAP_YEAR_DAY_FRACTION) + ADDED_SECONDS_FRACTION
    )
    emit("julian_day", julian_day)

    mean_solar_time = julian_day - longitude / 360.0
    emit("mean_solar_time", mean_solar_time)

    mean_anomaly = (MEAN_ANOMALY_AT_EPOCH_DEG + MEAN_ANOMALY_RATE_DEG * mean_solar_time) % 360.0
    emit("solar_mean_anomaly", mean_anomaly)
    mean_anomaly_rad = math.radians(mean_anomaly)

    c1, c2, c3 = EQUATION_OF_CENTER_COEFFS
    equation_of_center = (
        c1 * math.sin(mean_anomaly_rad)
        + c2 * math.sin(2.0 * mean_anomaly_rad)
        + c3 * math.sin(3.0 * mean_anomaly_rad)
    )
    emit("equation_of_center", equation_of_center)

    ecliptic_longitude = (
        mean_anomaly + equation_of_center + 180.0 + PERIHELION_ARGUMENT_DEG
    ) % 360.0
    emit("ecliptic_longitude", ecliptic_longitude)
    ecliptic_longitude_rad = math.radians(ecliptic_longitude)

    # The reference formula feeds 2L in degrees to sin().
    double_longitude = 2.0 * ecliptic_longitude_rad if corrected_transit else 2.0 * ecliptic_longitude
    solar_transit = (
        J2000
        + mean_solar_time
        + TRANSIT_ANOMALY_COEFF * math.sin(mean_anomaly_rad)
        - TRANSIT_LONGITUDE_COEFF * math.sin(double_longitude)
    )
    emit("solar_transit", solar_transit)

    sin_declination = math.sin(ecliptic_longitude_rad) * math.sin(math.radians(OBLIQUITY_DEG))
    cos_declination = math.cos(math.asin(sin_declination))
    emit("sin_declination", sin_declination)
    emit("cos_declination", cos_declination)

    horizon_deg = REFRACTION_DEG - ELEVATION_DIP_COEFFICIENT * math.sqrt(elevation) / 60.0
    latitude_rad = math.radians(latitude)
    hour_angle_cosine = (
        math.sin(math.radians(horizon_deg)) - math.sin(latitude_rad) * sin_declination
    ) / (math.cos(latitude_rad) * cos_declination)
    emit("hour_angle_cosine", hour_angle_cosine)
    if hour_angle_cosine < -1.0 or hour_angle_cosine > 1.0:
        raise SunNeverRisesOrSetsError(hour_angle_cosine)

    hour_angle = math.degrees(math.acos(hour_angle_cosine))
    emit("hour_angle", hour_angle)

    julian_rise = solar_transit - hour_angle / 360.0
    julian_set = solar_transit + hour_angle / 360.0
    sunrise = julian_to_epoch(julian_rise)
    sunset = julian_to_epoch(julian_set)
    emit("sunrise", sunrise)
    emit("sunset", sunset)

    return SolarEvents(
        instant=instant,
        latitude=latitude,
        longitude=longitude,
        elevation=elevation,
        julian_date=julian_date,
        julian_day=julian_day,
        mean_solar_time=mean_solar_time,
        solar_mean_anomaly=mean_anomaly,
        equation_of_center=equation_of_center,
        ecliptic_longitude=ecliptic_longitude,
        solar_transit=solar_transit,
        sin_declination=sin_declination,
        cos_declination=cos_declination,
        hour_angle_cosine=hour_angle_cosine,
        hour_angle=hour_angle,
        sunrise=sunrise,
        sunset=sunset,
    )


def compute_sunrise_sunset(
    instant: float,
    latitude: float,
    longitude: float,
    elevation: float = 0.0,
    *,
    observer: Optional[Observer] = None,
    corrected_transit: bool = False,
) -> Tuple[float, float]:
    """Return ``(sunrise, sunset)`` as seconds since the Unix epoch.

    See :func:`solar_events` for parameters and raised errors.
    """

    events = solar_events(
        instant,
        latitude,
        longitude,
        elevation,
        observer=observer,
        corrected_transit=corrected_transit,
    )
    return events.sunrise, events.sunset
