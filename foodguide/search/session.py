from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Literal, Protocol, Union

from .config import DEFAULT_SEARCH_CONFIG, SearchConfig
from .errors import FoodGuideError, LocationError, LocationUnsupported, SearchError
from .location import LocationProvider
from .models import CuisineCategory, GeoLocation, LoadingState, Restaurant

logger = logging.getLogger(__name__)

LOCATION_UNSUPPORTED_MESSAGE = "Your browser does not support geolocation."
LOCATION_UNAVAILABLE_MESSAGE = (
    "We couldn't get your location. Please turn on location services to find food nearby."
)
SEARCH_FAILED_MESSAGE = "Search failed. The AI may be busy, please try again later."


class RestaurantSearcher(Protocol):
    async def search(
        self, location: GeoLocation, category: CuisineCategory | str
    ) -> list[Restaurant]: ...


class InvalidTransition(FoodGuideError):
    """A state change the session state machine does not allow."""


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Locating:
    kind: ClassVar[LoadingState] = LoadingState.locating


@dataclass(frozen=True)
class Idle:
    location: GeoLocation
    kind: ClassVar[LoadingState] = LoadingState.idle


@dataclass(frozen=True)
class Searching:
    location: GeoLocation
    category: str
    seq: int
    kind: ClassVar[LoadingState] = LoadingState.searching


@dataclass(frozen=True)
class Success:
    location: GeoLocation
    category: str
    restaurants: tuple[Restaurant, ...] = field(default_factory=tuple)
    kind: ClassVar[LoadingState] = LoadingState.success


@dataclass(frozen=True)
class Error:
    source: Literal["location", "search"]
    message: str
    location: GeoLocation | None = None
    kind: ClassVar[LoadingState] = LoadingState.error


SessionState = Union[Locating, Idle, Searching, Success, Error]

_ALLOWED: dict[LoadingState, set[LoadingState]] = {
    LoadingState.locating: {LoadingState.locating, LoadingState.idle, LoadingState.error},
    LoadingState.idle: {LoadingState.searching},
    LoadingState.searching: {LoadingState.searching, LoadingState.success, LoadingState.error},
    LoadingState.success: {LoadingState.searching},
    LoadingState.error: {LoadingState.searching, LoadingState.locating},
}


@dataclass(frozen=True)
class SessionSnapshot:
    """What the view layer needs to render one frame."""

    state: LoadingState
    selected_category: str
    restaurants: tuple[Restaurant, ...] = ()
    error_message: str | None = None
    location_known: bool = False


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class SearchSession:
    """
    Owns the locating → idle → searching → success / error state machine.

    ``_transition`` is the only place the state changes. Every search is
    tagged with a sequence number and a result that arrives after a newer
    search was issued is dropped, so the latest-issued search wins.
    """

    def __init__(
        self,
        searcher: RestaurantSearcher,
        config: SearchConfig = DEFAULT_SEARCH_CONFIG,
    ) -> None:
        self._searcher = searcher
        self._state: SessionState = Locating()
        self._location: GeoLocation | None = None
        self._selected_category: str = config.default_category.value
        self._seq = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def location(self) -> GeoLocation | None:
        return self._location

    @property
    def selected_category(self) -> str:
        return self._selected_category

    def snapshot(self) -> SessionSnapshot:
        state = self._state
        return SessionSnapshot(
            state=state.kind,
            selected_category=self._selected_category,
            restaurants=state.restaurants if isinstance(state, Success) else (),
            error_message=state.message if isinstance(state, Error) else None,
            location_known=self._location is not None,
        )

    # ── Events ──────────────────────────────────────────────────────────

    async def start(self, provider: LocationProvider) -> None:
        """Acquire the position once, then run the first search."""
        if self._location is not None:
            raise InvalidTransition("location already acquired for this session")
        self._transition(Locating())

        try:
            location = await provider.current_position()
        except LocationUnsupported:
            logger.warning("Geolocation unsupported by client", exc_info=True)
            self._transition(Error(source="location", message=LOCATION_UNSUPPORTED_MESSAGE))
            return
        except LocationError:
            logger.warning("Geolocation failed", exc_info=True)
            self._transition(Error(source="location", message=LOCATION_UNAVAILABLE_MESSAGE))
            return

        self._location = location
        self._transition(Idle(location=location))
        await self._search(self._selected_category)

    async def select_category(self, category: CuisineCategory | str) -> None:
        category = category.value if isinstance(category, CuisineCategory) else category
        if category == self._selected_category:
            return
        self._selected_category = category
        if self._location is not None:
            await self._search(category)

    async def retry(self, provider: LocationProvider | None = None) -> None:
        """Re-run the last search, or go back to locating when no position is known."""
        if self._location is not None:
            await self._search(self._selected_category)
        elif provider is not None:
            await self.start(provider)
        else:
            self._transition(Locating())

    # ── Internals ───────────────────────────────────────────────────────

    async def _search(self, category: str) -> None:
        location = self._location
        self._seq += 1
        seq = self._seq
        self._transition(Searching(location=location, category=category, seq=seq))

        try:
            restaurants = await self._searcher.search(location, category)
        except SearchError:
            if seq != self._seq:
                logger.info("Dropping failure of superseded search #%d (%r)", seq, category)
                return
            logger.warning("Search #%d for %r failed", seq, category, exc_info=True)
            self._transition(
                Error(source="search", message=SEARCH_FAILED_MESSAGE, location=location)
            )
            return

        if seq != self._seq:
            logger.info("Dropping result of superseded search #%d (%r)", seq, category)
            return
        self._transition(
            Success(location=location, category=category, restaurants=tuple(restaurants))
        )

    def _transition(self, new_state: SessionState) -> None:
        current = self._state.kind
        if new_state.kind not in _ALLOWED[current]:
            raise InvalidTransition(f"{current.value} -> {new_state.kind.value}")
        logger.debug("Session state %s -> %s", current.value, new_state.kind.value)
        self._state = new_state
