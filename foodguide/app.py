from __future__ import annotations

import logging
import os
import uuid
from collections import OrderedDict

from fastapi import Depends, FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from .llm.gemini_client import build_search_client
from .search.config import DEFAULT_SEARCH_CONFIG
from .search.location import LocationReport, ReportedLocationProvider
from .search.models import CategoryRequest, CuisineCategory, LoadingState
from .search.session import RestaurantSearcher, SearchSession, SessionSnapshot
from .search.view import render

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

MAX_SESSIONS = int(os.environ.get("FOODGUIDE_MAX_SESSIONS", "1000"))


def session_secret() -> str:
    # .env is loaded by the llm config import above.
    return os.environ.get("SESSION_SECRET", "foodguide-secret-change-in-production")


app = FastAPI(title="Food Guide AI", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=session_secret())

_sessions: OrderedDict[str, SearchSession] = OrderedDict()


def get_search_client(request: Request) -> RestaurantSearcher:
    """Keep one Gemini-backed client on the app; the SDK client is built on first search."""
    client = getattr(request.app.state, "search_client", None)
    if client is None:
        client = build_search_client()
        request.app.state.search_client = client
    return client


def _existing_session(request: Request) -> SearchSession | None:
    sid = request.session.get("sid")
    session = _sessions.get(sid) if sid else None
    if session is not None:
        _sessions.move_to_end(sid)
    return session


def _session_for(request: Request, searcher: RestaurantSearcher) -> SearchSession:
    session = _existing_session(request)
    if session is not None:
        return session

    sid = uuid.uuid4().hex
    request.session["sid"] = sid
    session = _sessions[sid] = SearchSession(searcher)
    while len(_sessions) > MAX_SESSIONS:
        evicted, _ = _sessions.popitem(last=False)
        logger.info("Evicted least recently used search session %s", evicted)
    logger.info("Created search session %s", sid)
    return session


def _fresh_snapshot() -> SessionSnapshot:
    return SessionSnapshot(
        state=LoadingState.locating,
        selected_category=DEFAULT_SEARCH_CONFIG.default_category.value,
    )


def clear_sessions() -> None:
    _sessions.clear()


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/categories")
def categories() -> dict:
    return {
        "categories": [c.value for c in CuisineCategory],
        "default": DEFAULT_SEARCH_CONFIG.default_category.value,
    }


# ── Session endpoints ────────────────────────────────────────────────────


@app.get("/session")
def session_view(request: Request) -> dict:
    session = _existing_session(request)
    return render(session.snapshot() if session is not None else _fresh_snapshot())


@app.post("/session/location")
async def report_location(
    body: LocationReport,
    request: Request,
    searcher: RestaurantSearcher = Depends(get_search_client),
) -> dict:
    session = _session_for(request, searcher)
    if session.location is not None:
        # A located session keeps its position; a new report starts over.
        _sessions.pop(request.session["sid"], None)
        session = _session_for(request, searcher)
    await session.start(ReportedLocationProvider(body))
    return render(session.snapshot())


@app.post("/session/category")
async def select_category(
    body: CategoryRequest,
    request: Request,
    searcher: RestaurantSearcher = Depends(get_search_client),
) -> dict:
    session = _session_for(request, searcher)
    await session.select_category(body.category)
    return render(session.snapshot())


@app.post("/session/retry")
async def retry(
    request: Request,
    body: LocationReport | None = None,
    searcher: RestaurantSearcher = Depends(get_search_client),
) -> dict:
    session = _session_for(request, searcher)
    provider = ReportedLocationProvider(body) if body is not None else None
    await session.retry(provider)
    return render(session.snapshot())
