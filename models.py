"""Pydantic models for API requests and responses."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from sunclock.formatting import MAX_DISPLAY_TIMESTAMP, MIN_DISPLAY_TIMESTAMP


class TransitFormula(str, Enum):
    """Variants of the solar transit equation."""

    reference = "reference"
    corrected = "corrected"


class SunQueryParams(BaseModel):
    """Validated query parameters for the ``/sun`` endpoint."""

    lat: Optional[float] = Field(
        None, gt=-90.0, lt=90.0, description="Latitude in degrees (configured default if omitted)"
    )
    lon: Optional[float] = Field(
        None, gt=-180.0, le=180.0, description="Longitude in degrees (configured default if omitted)"
    )
    elev_m: Optional[float] = Field(
        None, ge=0.0, description="Observer elevation in meters (configured default if omitted)"
    )
    timestamp: Optional[float] = Field(
        None,
        ge=MIN_DISPLAY_TIMESTAMP,
        le=MAX_DISPLAY_TIMESTAMP,
        description="Seconds since the Unix epoch; defaults to the current time",
    )
    offset_hours: Optional[float] = Field(
        None,
        description="Optional fixed offset in hours applied to derive local times",
    )
    transit: TransitFormula = Field(
        TransitFormula.reference, description="Solar transit formula variant"
    )

    @field_validator("offset_hours")
    @classmethod
    def validate_offset_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if not -24.0 < value < 24.0:
            raise ValueError("offset_hours must be within ±24 hours")
        return value


class SunResponse(BaseModel):
    """Sunrise/sunset response payload."""

    ok: bool = True
    status: Literal["ok", "polar_day", "polar_night"] = Field(
        ..., description="Computation status"
    )
    timestamp: float = Field(..., description="Instant the computation was made for")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    elevation_m: float = Field(..., description="Elevation above mean sea level")
    transit: TransitFormula = Field(..., description="Applied transit formula")
    julian_date: float = Field(..., description="Julian date of the requested instant")
    sunrise_ts: Optional[float] = Field(None, description="Sunrise in epoch seconds")
    sunset_ts: Optional[float] = Field(None, description="Sunset in epoch seconds")
    sunrise_utc: Optional[str] = Field(
        None, description="Sunrise time in UTC (ISO-8601)"
    )
    sunset_utc: Optional[str] = Field(
        None, description="Sunset time in UTC (ISO-8601)"
    )
    transit_utc: Optional[str] = Field(
        None, description="Solar transit time in UTC (ISO-8601)"
    )
    offset_hours: Optional[float] = Field(
        None, description="User-specified offset in hours"
    )
    sunrise_local: Optional[str] = Field(
        None, description="Sunrise expressed in local time when offset provided"
    )
    sunset_local: Optional[str] = Field(
        None, description="Sunset expressed in local time when offset provided"
    )


class LocationModel(BaseModel):
    latitude: float
    longitude: float
    elevation_m: float
    utc_offset_hours: float


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    default_location: LocationModel


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
