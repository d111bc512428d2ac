"""FastAPI application exposing sunrise and sunset computations."""

from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime, timedelta, timezone
from typing import Annotated, Optional

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from models import (
    ErrorResponse,
    HealthResponse,
    LocationModel,
    SunQueryParams,
    SunResponse,
    TransitFormula,
)
from sunclock.astro import (
    InvalidInputError,
    SunNeverRisesOrSetsError,
    epoch_to_julian,
    solar_events,
)
from sunclock.config import ConfigurationError, ObserverLocation, resolve_location

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("sunclock-api")

APP_DESCRIPTION = (
    "Sunrise and sunset calculations from a closed-form solar position approximation"
)

DEFAULT_LOCATION: Optional[ObserverLocation] = None


def _default_location() -> ObserverLocation:
    global DEFAULT_LOCATION
    if DEFAULT_LOCATION is None:
        DEFAULT_LOCATION = resolve_location()
    return DEFAULT_LOCATION


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - exercised in integration tests
    global DEFAULT_LOCATION
    try:
        DEFAULT_LOCATION = resolve_location()
    except ConfigurationError as exc:
        LOGGER.error(json.dumps({"event": "configuration_failed", "error": str(exc)}))
        raise
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "lat": DEFAULT_LOCATION.latitude,
                "lon": DEFAULT_LOCATION.longitude,
                "elev_m": DEFAULT_LOCATION.elevation,
            }
        )
    )
    yield


app = FastAPI(
    title="Sunclock API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)


def _format_utc(ts: Optional[float]) -> Optional[str]:
    if ts is None:
        return None
    dt = datetime.fromtimestamp(ts, tz=UTC)
    return dt.isoformat().replace("+00:00", "Z")


def _format_local(ts: Optional[float], offset_hours: Optional[float]) -> Optional[str]:
    if ts is None or offset_hours is None:
        return None
    offset = timezone(timedelta(hours=offset_hours))
    return datetime.fromtimestamp(ts, tz=offset).isoformat()


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    location = _default_location()
    return HealthResponse(
        ok=True,
        default_location=LocationModel(
            latitude=location.latitude,
            longitude=location.longitude,
            elevation_m=location.elevation,
            utc_offset_hours=location.utc_offset_hours,
        ),
    )


@app.get(
    "/sun",
    response_model=SunResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def sun_endpoint(params: Annotated[SunQueryParams, Query()]) -> SunResponse:
    start_time = time.perf_counter()
    location = _default_location()
    lat = location.latitude if params.lat is None else params.lat
    lon = location.longitude if params.lon is None else params.lon
    elev_m = location.elevation if params.elev_m is None else params.elev_m
    instant = time.time() if params.timestamp is None else params.timestamp

    sunrise: Optional[float] = None
    sunset: Optional[float] = None
    transit: Optional[float] = None
    try:
        events = solar_events(
            instant,
            lat,
            lon,
            elev_m,
            corrected_transit=params.transit is TransitFormula.corrected,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SunNeverRisesOrSetsError as exc:
        status = "polar_day" if exc.polar_day else "polar_night"
    else:
        status = "ok"
        sunrise, sunset, transit = events.sunrise, events.sunset, events.transit

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = SunResponse(
        status=status,
        timestamp=instant,
        latitude=lat,
        longitude=lon,
        elevation_m=elev_m,
        transit=params.transit,
        julian_date=epoch_to_julian(instant),
        sunrise_ts=sunrise,
        sunset_ts=sunset,
        sunrise_utc=_format_utc(sunrise),
        sunset_utc=_format_utc(sunset),
        transit_utc=_format_utc(transit),
        offset_hours=params.offset_hours,
        sunrise_local=_format_local(sunrise, params.offset_hours),
        sunset_local=_format_local(sunset, params.offset_hours),
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "sun",
                "lat": lat,
                "lon": lon,
                "elev_m": elev_m,
                "timestamp": instant,
                "transit": params.transit.value,
                "status": response.status,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response
