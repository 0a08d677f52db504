# backend/moodmate/adapters/gemini_client.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from moodmate.core.config import Settings, get_settings
from moodmate.core.errors import ConfigError, UpstreamError, UpstreamTimeout
from moodmate.utils.text import truncate

log = logging.getLogger("moodmate.gemini")

__all__ = ["GeminiClient", "extract_text"]


def extract_text(payload: Any) -> str:
    """
    Pull candidates[0].content.parts[0].text out of a generateContent reply.
    Raises UpstreamError if the path is missing or not a string.
    """
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamError(f"malformed generateContent payload: {type(e).__name__}") from e
    if not isinstance(text, str):
        raise UpstreamError("malformed generateContent payload: text is not a string")
    return text


class GeminiClient:
    """
    Single-shot client for the Gemini REST `generateContent` endpoint.
    Exactly one HTTP call per generate(); no retries.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.8,
        max_output_tokens: int = 1000,
        timeout_s: float = 25.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ConfigError("GEMINI_API_KEY is not set")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GeminiClient":
        s = settings or get_settings()
        return cls(
            s.GEMINI_API_KEY or "",
            model=s.GEMINI_MODEL,
            base_url=s.GEMINI_BASE_URL,
            temperature=s.GEMINI_TEMPERATURE,
            max_output_tokens=s.GEMINI_MAX_OUTPUT_TOKENS,
            timeout_s=s.GEMINI_TIMEOUT_S,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def body(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
                "temperature": self.temperature,
            },
        }

    async def _post(self, prompt: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
            return await client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.body(prompt),
                headers={"accept": "application/json"},
            )

    async def generate(self, prompt: str) -> str:
        try:
            # wall-clock bound; httpx's own timeout is per network phase
            resp = await asyncio.wait_for(self._post(prompt), timeout=self.timeout_s)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeout(f"generateContent timed out after {self.timeout_s:.0f}s") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"generateContent transport error: {type(e).__name__}: {e}") from e

        if not resp.is_success:
            raise UpstreamError(
                "generateContent returned an error status",
                status=resp.status_code,
                body=truncate(resp.text, 500),
            )
        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamError(
                "generateContent returned non-JSON body",
                status=resp.status_code,
                body=truncate(resp.text, 500),
            ) from e
        text = extract_text(payload)
        log.debug("gemini ok model=%s chars=%d", self.model, len(text))
        return text
