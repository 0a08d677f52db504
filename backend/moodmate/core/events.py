from __future__ import annotations

import logging
from typing import Literal, cast
from fastapi import FastAPI

from moodmate.core.config import get_settings
from moodmate.core.logging import setup_logging
from moodmate.adapters.supabase_client import supa_ping

log = logging.getLogger("moodmate.core")


def _startup_health() -> None:
    """
    Best-effort "are the basics alive" checks.
    Never raises; logs warnings so the app still boots in dev.
    """
    s = get_settings()
    if not s.GEMINI_API_KEY:
        log.warning("GEMINI_API_KEY missing; chat will answer with the fallback apology")
    if not s.NEWSAPI_KEY:
        log.warning("NEWSAPI_KEY missing; news enrichment will return an error payload")
    if not supa_ping(readonly=True):
        log.warning("supabase ping failed (readonly); chat log writes may fail")


def register_lifecycle(app: FastAPI) -> None:
    """
    Registers startup/shutdown hooks on the FastAPI app.
    """
    settings = get_settings()
    fmt: Literal["console", "json"] = cast(Literal["console", "json"], settings.LOG_FORMAT)
    setup_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO, fmt=fmt)

    @app.on_event("startup")
    async def _on_startup() -> None:  # noqa: D401
        log.info("starting %s (env=%s)", settings.APP_NAME, settings.ENV)
        _startup_health()

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:  # noqa: D401
        # local import: deps pull in the whole chat pipeline
        from moodmate.interfaces.http.deps.services import get_chat_service

        if get_chat_service.cache_info().currsize:
            sink = get_chat_service().sink
            await sink.drain()
            log.info("chat log sink drained: %s", sink.stats())
        log.info("shutting down %s", settings.APP_NAME)
