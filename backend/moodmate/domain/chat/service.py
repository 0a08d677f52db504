# backend/moodmate/domain/chat/service.py
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from moodmate import modes
from moodmate.adapters.gemini_client import GeminiClient
from moodmate.core.config import Settings, get_settings
from moodmate.core.errors import ConfigError, UpstreamError, UpstreamTimeout
from moodmate.domain.analytics.chatlog import ChatLogRecord, ChatLogSink
from moodmate.domain.external.service import ExternalContentService
from moodmate.domain.mood.classifier import classify
from moodmate.domain.prompts.builder import build_prompt
from moodmate.domain.responses.renderer import MISSING_KEY_APOLOGY, canned_reply, render
from moodmate.schemas.chat import BotReply, ModeRequest, MusicContent, NewsContent

log = logging.getLogger("moodmate.chat")

Generator = Callable[[str], Awaitable[str]]
External = Optional[Union[NewsContent, MusicContent]]

__all__ = ["ChatService"]


class ChatService:
    """
    One call = classify -> external lookup (concurrent with generation) ->
    prompt -> generate -> render -> persist -> BotReply.

    Degrades instead of raising:
      parse failure          -> mode fallback block (renderer)
      upstream error/timeout -> canned reply for the detected mood
      missing API key        -> fixed apology, no network call
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        generator: Optional[Generator] = None,
        sink: Optional[ChatLogSink] = None,
        external: Optional[ExternalContentService] = None,
        scorer: Optional[Callable[[str], float]] = None,
    ):
        self.settings = settings or get_settings()
        self._generator = generator
        self.sink = sink or ChatLogSink.default()
        self.external = external or ExternalContentService(self.settings)
        self._scorer = scorer

    @classmethod
    def default(cls) -> "ChatService":
        return cls(get_settings())

    def _resolve_generator(self) -> Generator:
        if self._generator is not None:
            return self._generator
        return GeminiClient.from_settings(self.settings).generate  # ConfigError without a key

    def _should_persist(self, user_id: Optional[str], *, missing_key: bool) -> bool:
        s = self.settings
        if missing_key and not s.PERSIST_ON_MISSING_KEY:
            return False
        if s.REQUIRE_USER_ID_FOR_PERSISTENCE and not user_id:
            return False
        return True

    async def _persist(self, req: ModeRequest, text: str, mood: str) -> None:
        record = ChatLogRecord(
            user_id=req.user_id or None,
            user_message=req.message,
            bot_response=text,
            detected_mood=mood,
        )
        try:
            if self.settings.CHATLOG_BLOCKING:
                await self.sink.persist(record)
            else:
                self.sink.submit(record)
        except Exception as e:
            log.warning("chat log persistence could not be scheduled: %s", e)

    async def _await_external(self, task: "asyncio.Task[External]") -> External:
        try:
            return await task
        except Exception as e:
            log.warning("external content dropped: %s", e)
            return None

    async def get_bot_response(self, req: ModeRequest) -> BotReply:
        mode = modes.normalize(req.mode)
        window = self.settings.HISTORY_WINDOW
        mood = classify(req.message, req.history, window=window, scorer=self._scorer)

        # no data dependency between the lookup and the model call
        ext_task = asyncio.ensure_future(self.external.maybe_fetch(req.message))

        try:
            generate = self._resolve_generator()
        except ConfigError as e:
            log.error("generation disabled: %s", e)
            external = await self._await_external(ext_task)
            if self._should_persist(req.user_id, missing_key=True):
                await self._persist(req, MISSING_KEY_APOLOGY, mood)
            return BotReply(botResponse=MISSING_KEY_APOLOGY, detectedMood=mood, external=external)

        prompt = build_prompt(req.message, mood, req.history, mode, history_limit=window)
        text: Optional[str] = None
        try:
            raw = await generate(prompt)
            text = render(raw, mode)
        except UpstreamTimeout as e:
            log.warning("gemini timeout (mode=%s): %s", mode, e)
        except UpstreamError as e:
            log.warning("gemini upstream error (mode=%s): %s body=%r", mode, e, e.body)
        except Exception as e:
            log.exception("gemini call crashed (mode=%s): %s", mode, e)

        external = await self._await_external(ext_task)
        if text is None:
            text = canned_reply(mood, external.type if external else None)

        if self._should_persist(req.user_id, missing_key=False):
            await self._persist(req, text, mood)
        return BotReply(botResponse=text, detectedMood=mood, external=external)
