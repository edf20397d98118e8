from __future__ import annotations

from typing import Literal, Protocol

from pydantic import BaseModel

from .errors import (
    LocationDenied,
    LocationError,
    LocationUnavailable,
    LocationUnsupported,
)
from .models import GeoLocation

LocationErrorCode = Literal["unsupported", "denied", "unavailable"]

_ERRORS: dict[str, type[LocationError]] = {
    "unsupported": LocationUnsupported,
    "denied": LocationDenied,
    "unavailable": LocationUnavailable,
}


class LocationProvider(Protocol):
    async def current_position(self) -> GeoLocation:
        """Return one best-effort position or raise a ``LocationError``."""
        ...


class LocationReport(BaseModel):
    """Outcome of a one-shot browser geolocation request."""

    lat: float | None = None
    lng: float | None = None
    error: LocationErrorCode | None = None
    detail: str | None = None


class ReportedLocationProvider:
    """Replays the geolocation outcome the client already obtained."""

    def __init__(self, report: LocationReport) -> None:
        self._report = report

    async def current_position(self) -> GeoLocation:
        report = self._report
        if report.error:
            raise _ERRORS[report.error](report.detail or report.error)
        if report.lat is None or report.lng is None:
            raise LocationUnavailable("location report carries no coordinates")
        return GeoLocation(lat=report.lat, lng=report.lng)


class StaticLocationProvider:
    """Always answers with the same coordinates."""

    def __init__(self, location: GeoLocation) -> None:
        self._location = location

    async def current_position(self) -> GeoLocation:
        return self._location
