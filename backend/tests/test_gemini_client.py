from __future__ import annotations

import asyncio
import json
import os
import sys

THIS_DIR = os.path.dirname(__file__)
PKG_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PKG_ROOT not in sys.path:
    sys.path.insert(0, PKG_ROOT)

import httpx
import pytest

from moodmate.adapters.gemini_client import GeminiClient, extract_text
from moodmate.core.config import Settings
from moodmate.core.errors import ConfigError, UpstreamError, UpstreamTimeout


def _ok_payload(text: str = "You are not alone.") -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(handler, **kw) -> GeminiClient:
    return GeminiClient("test-key", transport=httpx.MockTransport(handler), **kw)


def test_generate_posts_expected_body_and_returns_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_ok_payload("Hello there"))

    cli = _client(handler, model="gemini-2.5-flash", temperature=0.8, max_output_tokens=1000)
    out = asyncio.run(cli.generate("prompt text"))

    assert out == "Hello there"
    assert seen["url"].path.endswith("/models/gemini-2.5-flash:generateContent")
    assert seen["url"].params["key"] == "test-key"
    assert seen["body"] == {
        "contents": [{"parts": [{"text": "prompt text"}]}],
        "generationConfig": {"maxOutputTokens": 1000, "temperature": 0.8},
    }


def test_exactly_one_call_on_failure():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, text="overloaded")

    with pytest.raises(UpstreamError) as ei:
        asyncio.run(_client(handler).generate("p"))
    assert len(calls) == 1
    assert ei.value.status == 503
    assert "overloaded" in ei.value.body


@pytest.mark.parametrize("payload", [
    {},
    {"candidates": []},
    {"candidates": [{"content": {"parts": []}}]},
    {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
    [],
])
def test_malformed_payload_is_upstream_error(payload):
    with pytest.raises(UpstreamError):
        asyncio.run(_client(lambda r: httpx.Response(200, json=payload)).generate("p"))


def test_non_json_body_is_upstream_error():
    with pytest.raises(UpstreamError):
        asyncio.run(_client(lambda r: httpx.Response(200, text="<html>")).generate("p"))


def test_transport_timeout_is_upstream_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamTimeout):
        asyncio.run(_client(handler).generate("p"))


def test_wall_clock_bound_is_upstream_timeout():
    async def handler(request):
        await asyncio.sleep(1.0)
        return httpx.Response(200, json=_ok_payload())

    with pytest.raises(UpstreamTimeout):
        asyncio.run(_client(handler, timeout_s=0.05).generate("p"))


def test_timeout_is_an_upstream_error():
    assert issubclass(UpstreamTimeout, UpstreamError)


def test_missing_key_is_config_error():
    with pytest.raises(ConfigError):
        GeminiClient.from_settings(Settings(_env_file=None, GEMINI_API_KEY=None))


def test_from_settings_reads_generation_params():
    s = Settings(
        _env_file=None,
        GEMINI_API_KEY="abc",
        GEMINI_MODEL="gemini-test",
        GEMINI_TEMPERATURE=0.7,
        GEMINI_MAX_OUTPUT_TOKENS=900,
    )
    cli = GeminiClient.from_settings(s)
    assert cli.model == "gemini-test"
    assert cli.body("x")["generationConfig"] == {"maxOutputTokens": 900, "temperature": 0.7}
    assert cli.timeout_s == 25.0


def test_default_model_is_a_served_flash_model(monkeypatch):
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    cli = GeminiClient.from_settings(Settings(_env_file=None, GEMINI_API_KEY="abc"))
    assert cli.model == "gemini-2.5-flash"
    assert GeminiClient("abc").model == cli.model


def test_extract_text():
    assert extract_text(_ok_payload("hi")) == "hi"
