from unittest.mock import AsyncMock, patch

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from foodguide import app as app_module
from foodguide.app import app, clear_sessions, get_search_client, session_secret
from foodguide.llm.extraction import extract_restaurants
from foodguide.search.errors import TransportFailure


@pytest.fixture
def searcher(sample_response_text):
    mock = AsyncMock()
    mock.search.return_value = extract_restaurants(sample_response_text)
    app.dependency_overrides[get_search_client] = lambda: mock
    clear_sessions()
    yield mock
    app.dependency_overrides.clear()
    clear_sessions()


@pytest.fixture
def client(searcher):
    return TestClient(app)


def test_health():
    resp = TestClient(app).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_categories():
    body = TestClient(app).get("/categories").json()
    assert body["default"] == "Recommended"
    assert "Cafe" in body["categories"]


def test_new_session_is_locating(client):
    body = client.get("/session").json()
    assert body["state"] == "locating"
    assert body["header"]["located"] is False


def test_location_report_runs_first_search(client, searcher):
    resp = client.post("/session/location", json={"lat": 25.03, "lng": 121.56})

    assert resp.status_code == 200
    body = resp.json()
    assert body["state"] == "success"
    assert len(body["body"]["cards"]) == 2
    location, category = searcher.search.await_args.args
    assert (location.lat, location.lng) == (25.03, 121.56)
    assert category == "Recommended"


def test_denied_location_then_retry_with_position(client, searcher):
    body = client.post("/session/location", json={"error": "denied"}).json()
    assert body["state"] == "error"
    assert body["body"]["action"]["event"] == "retry"

    body = client.post("/session/retry").json()
    assert body["state"] == "locating"
    searcher.search.assert_not_called()

    body = client.post("/session/retry", json={"lat": 25.03, "lng": 121.56}).json()
    assert body["state"] == "success"


def test_category_change_searches_again(client, searcher):
    client.post("/session/location", json={"lat": 25.03, "lng": 121.56})

    body = client.post("/session/category", json={"category": "Cafe"}).json()

    assert body["selectedCategory"] == "Cafe"
    assert searcher.search.await_args.args[1] == "Cafe"
    assert searcher.search.await_count == 2


def test_same_category_does_not_search(client, searcher):
    client.post("/session/location", json={"lat": 25.03, "lng": 121.56})
    client.post("/session/category", json={"category": "Recommended"})
    assert searcher.search.await_count == 1


def test_unknown_category_rejected(client):
    resp = client.post("/session/category", json={"category": "Martian"})
    assert resp.status_code == 422


def test_search_failure_hides_detail(client, searcher):
    searcher.search.side_effect = TransportFailure("API key invalid: sk-123")

    body = client.post("/session/location", json={"lat": 25.03, "lng": 121.56}).json()

    assert body["state"] == "error"
    assert "sk-123" not in body["body"]["message"]


def test_sessions_are_per_client(searcher):
    first, second = TestClient(app), TestClient(app)
    first.post("/session/location", json={"lat": 25.03, "lng": 121.56})

    assert first.get("/session").json()["state"] == "success"
    assert second.get("/session").json()["state"] == "locating"


def test_new_location_report_restarts_session(client, searcher):
    client.post("/session/location", json={"lat": 25.03, "lng": 121.56})
    client.post("/session/category", json={"category": "Bar"})

    body = client.post("/session/location", json={"lat": 35.68, "lng": 139.69}).json()

    assert body["state"] == "success"
    assert body["selectedCategory"] == "Recommended"
    location, _ = searcher.search.await_args.args
    assert location.lat == 35.68


# ── Configuration ────────────────────────────────────────────────────────


def test_session_secret_read_from_dotenv(tmp_path, monkeypatch):
    monkeypatch.delenv("SESSION_SECRET", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("SESSION_SECRET=from-dotenv\n")

    load_dotenv(env_file)

    assert session_secret() == "from-dotenv"


def test_middleware_signs_with_configured_secret():
    middleware = next(m for m in app.user_middleware if m.cls is SessionMiddleware)
    assert middleware.kwargs["secret_key"] == session_secret()


# ── Session registry ─────────────────────────────────────────────────────


def test_reading_session_does_not_register_one(searcher):
    for _ in range(50):
        body = TestClient(app).get("/session").json()
        assert body["state"] == "locating"
        assert body["selectedCategory"] == "Recommended"

    assert len(app_module._sessions) == 0


def test_registry_evicts_least_recently_used(searcher, monkeypatch):
    monkeypatch.setattr(app_module, "MAX_SESSIONS", 3)
    oldest = TestClient(app)
    oldest.post("/session/location", json={"lat": 25.03, "lng": 121.56})
    kept = TestClient(app)
    kept.post("/session/location", json={"lat": 25.03, "lng": 121.56})

    for _ in range(2):
        TestClient(app).post("/session/location", json={"lat": 25.03, "lng": 121.56})
        kept.get("/session")

    assert len(app_module._sessions) == 3
    assert kept.get("/session").json()["state"] == "success"
    assert oldest.get("/session").json()["state"] == "locating"


# ── Missing credentials ──────────────────────────────────────────────────


@patch(
    "foodguide.llm.gemini_client.genai.Client",
    side_effect=ValueError("Missing key inputs argument!"),
)
def test_missing_api_key_surfaces_as_search_error(mock_client_cls, monkeypatch):
    monkeypatch.setattr(app.state, "search_client", None, raising=False)
    clear_sessions()
    client = TestClient(app)

    assert client.get("/session").status_code == 200

    resp = client.post("/session/location", json={"lat": 25.03, "lng": 121.56})

    assert resp.status_code == 200
    body = resp.json()
    assert body["state"] == "error"
    assert body["body"]["action"]["event"] == "retry"
    assert "Missing key" not in body["body"]["message"]
    clear_sessions()
