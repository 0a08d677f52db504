"""
Error taxonomy for the chat pipeline.

None of these reach the HTTP boundary from the chat service: each one selects
a fallback branch inside `ChatService.get_bot_response`.
"""
from __future__ import annotations

from typing import Optional


class MoodMateError(Exception):
    pass


class ConfigError(MoodMateError):
    """A required setting (API key, credentials) is absent."""


class UpstreamError(MoodMateError):
    """Non-2xx or malformed reply from the generative-language API."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (status={self.status})" if self.status is not None else base


class UpstreamTimeout(UpstreamError):
    """Generation call exceeded its wall-clock bound."""


class ParseError(MoodMateError):
    """Model text is not the JSON shape a structured mode asked for."""


class PersistenceError(MoodMateError):
    """Chat log write failed."""


__all__ = [
    "MoodMateError",
    "ConfigError",
    "UpstreamError",
    "UpstreamTimeout",
    "ParseError",
    "PersistenceError",
]
