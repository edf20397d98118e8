from __future__ import annotations


class FoodGuideError(Exception):
    """Base class for every error raised by the food guide."""


# ── Search errors ────────────────────────────────────────────────────────


class SearchError(FoodGuideError):
    """A restaurant search could not produce a result list."""


class InvalidInput(SearchError):
    """Category or coordinates rejected before any network call."""


class TransportFailure(SearchError):
    """Gemini call failed, timed out, or returned no text."""


class MalformedResponse(SearchError):
    """Gemini answered, but not with a usable fenced JSON array."""


# ── Location errors ──────────────────────────────────────────────────────


class LocationError(FoodGuideError):
    """The client position could not be acquired."""


class LocationUnsupported(LocationError):
    """The client has no geolocation capability."""


class LocationDenied(LocationError):
    """The user refused to share their position."""


class LocationUnavailable(LocationError):
    """The geolocation provider failed to produce a position."""
