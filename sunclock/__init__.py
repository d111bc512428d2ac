"""Sunrise and sunset times from a closed-form solar position approximation."""

from .astro import (
    InvalidInputError,
    SolarCalculationError,
    SolarEvents,
    SunNeverRisesOrSetsError,
    compute_sunrise_sunset,
    epoch_to_julian,
    julian_to_epoch,
    solar_events,
)

__all__ = [
    "compute_sunrise_sunset",
    "solar_events",
    "epoch_to_julian",
    "julian_to_epoch",
    "SolarEvents",
    "SolarCalculationError",
    "InvalidInputError",
    "SunNeverRisesOrSetsError",
]
