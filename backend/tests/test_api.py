"""
HTTP surface tests. Auth and the chat service are swapped through FastAPI's
dependency_overrides so nothing leaves the process.
"""
from __future__ import annotations

import os
import sys

THIS_DIR = os.path.dirname(__file__)
PKG_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PKG_ROOT not in sys.path:
    sys.path.insert(0, PKG_ROOT)

import pytest
from fastapi.testclient import TestClient

from moodmate.core.config import get_settings
from moodmate.domain.analytics import aggregations
from moodmate.domain.external.service import DEFAULT_GENRES
from moodmate.interfaces.http.deps.auth import get_current_user
from moodmate.interfaces.http.deps.services import get_chat_service
from moodmate.interfaces.http.main import app
from moodmate.interfaces.http.routers.external import get_external_service
from moodmate.schemas.chat import BotReply, ModeRequest, MusicContent, NewsContent


class StubChatService:
    def __init__(self):
        self.requests: list[ModeRequest] = []

    async def get_bot_response(self, req: ModeRequest) -> BotReply:
        self.requests.append(req)
        return BotReply(botResponse="I'm listening.", detectedMood="neutral")


@pytest.fixture
def stub():
    return StubChatService()


@pytest.fixture
def client(stub):
    app.dependency_overrides[get_current_user] = lambda: {"id": "user-7", "claims": {}}
    app.dependency_overrides[get_chat_service] = lambda: stub
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_chat_returns_reply_without_external_key(client, stub):
    r = client.post(
        "/chat",
        json={"message": "  hello there ", "chatHistory": [{"role": "assistant", "content": "Hi!"}]},
    )
    assert r.status_code == 200
    body = r.json()
    assert body == {"botResponse": "I'm listening.", "detectedMood": "neutral"}
    req = stub.requests[0]
    assert req.message == "hello there"
    assert req.user_id == "user-7"
    assert req.mode == "default"
    assert req.history[0].role == "bot"


def test_chat_rejects_empty_message_in_default_mode(client, stub):
    r = client.post("/chat", json={"message": "   "})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "http_error"
    assert body["message"] == "Missing message"
    assert body["request_id"]
    assert stub.requests == []


def test_chat_allows_empty_message_for_action_modes(client, stub):
    r = client.post("/chat", json={"message": "", "mode": "affirmations"})
    assert r.status_code == 200
    assert stub.requests[0].mode == "affirmations"


def test_unknown_mode_is_treated_as_default(client, stub):
    r = client.post("/chat", json={"message": "hi", "mode": "roleplay"})
    assert r.status_code == 200
    assert stub.requests[0].mode == "default"


def test_chat_validation_error_shape(client):
    r = client.post("/chat", json={"message": 123, "chatHistory": "nope"})
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "validation_error"
    assert body["meta"]["details"]


def test_chat_requires_auth_without_dev_bypass(monkeypatch, stub):
    monkeypatch.setenv("DEV_BYPASS_AUTH", "false")
    get_settings.cache_clear()
    app.dependency_overrides[get_chat_service] = lambda: stub
    try:
        r = TestClient(app).post("/chat", json={"message": "hi"})
    finally:
        app.dependency_overrides.clear()
        get_settings.cache_clear()
    assert r.status_code == 401
    assert r.json()["error"] == "http_error"


def test_modes_listing(client):
    r = client.get("/chat/modes")
    assert r.status_code == 200
    ids = [m["id"] for m in r.json()]
    assert ids == ["default", "mood_check", "affirmations"]


def test_healthz(client):
    r = client.get("/health/healthz")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_mood_analytics(client, monkeypatch):
    seen = {}

    def fake_fetch(user_id, days=7, limit=2000):
        seen["args"] = (user_id, days)
        return [
            {"detected_mood": "negative", "created_at": "2025-03-01T10:00:00Z"},
            {"detected_mood": "negative", "created_at": "2025-03-02T10:00:00Z"},
            {"detected_mood": "positive", "created_at": "2025-03-02T11:00:00Z"},
        ]

    monkeypatch.setattr(aggregations, "fetch_user_logs", fake_fetch)
    r = client.get("/analytics/moods", params={"days": 14})
    assert r.status_code == 200
    body = r.json()
    assert seen["args"] == ("user-7", 14)
    assert body["total"] == 3
    assert body["most_common"] == "negative"
    assert body["daily"]["2025-03-02"] == {"positive": 1, "neutral": 0, "negative": 1}


def test_mood_analytics_rejects_out_of_range_days(client):
    r = client.get("/analytics/moods", params={"days": 0})
    assert r.status_code == 422


class StubExternal:
    def __init__(self):
        self.music_calls = []

    async def news(self):
        return NewsContent(error="Missing NewsAPI key")

    async def music(self, message="", genre=None, mood=None):
        self.music_calls.append((genre, mood))
        return MusicContent(genres=list(DEFAULT_GENRES), playlists=[], error=f"no {genre} today")


def test_external_routes(client):
    ext = StubExternal()
    app.dependency_overrides[get_external_service] = lambda: ext
    r = client.get("/external/news")
    assert r.status_code == 200
    assert r.json() == {"type": "news", "articles": [], "error": "Missing NewsAPI key"}

    r = client.get("/external/playlists", params={"genre": "jazz"})
    assert r.status_code == 200
    body = r.json()
    assert body["type"] == "spotify_genres"
    assert body["genres"] == DEFAULT_GENRES
    assert body["error"] == "no jazz today"
    assert ext.music_calls == [("jazz", None)]

    r = client.get("/external/playlists", params={"mood": "anxious"})
    assert r.status_code == 200
    assert ext.music_calls[-1] == (None, "anxious")


def test_chat_null_message_is_missing_message(client, stub):
    r = client.post("/chat", json={"message": None})
    assert r.status_code == 400
    assert r.json()["message"] == "Missing message"
    assert stub.requests == []


def test_chat_null_message_allowed_for_action_modes(client, stub):
    r = client.post("/chat", json={"message": None, "mode": "mood_check"})
    assert r.status_code == 200
    assert stub.requests[0].message == ""


def test_mood_analytics_defaults_to_thirty_days(client, monkeypatch):
    seen = {}

    def fake_fetch(user_id, days=30, limit=2000):
        seen["days"] = days
        return [{"detected_mood": "positive", "created_at": "2025-03-01T10:00:00Z"}]

    monkeypatch.setattr(aggregations, "fetch_user_logs", fake_fetch)
    body = client.get("/analytics/moods").json()
    assert seen["days"] == 30
    assert body["days"] == 30
    assert (body["active_days"], body["avg_per_day"]) == (1, 1.0)
