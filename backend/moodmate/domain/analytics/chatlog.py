# backend/moodmate/domain/analytics/chatlog.py
"""
Chat log persistence: one insert per exchange into the ChatLog table.

Writes are best-effort. `submit()` runs the insert as a tracked background
task whose outcome is logged and counted; `drain()` waits for outstanding
writes (app shutdown). Nothing here raises to the caller.

Usage:
    sink = ChatLogSink.default()
    sink.submit(ChatLogRecord(user_id="u1", user_message="hi",
                              bot_response="hello", detected_mood="neutral"))
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Set

from moodmate.adapters.supabase_client import supa
from moodmate.core.config import get_settings
from moodmate.core.errors import PersistenceError
from moodmate.utils.time import utc_iso, utc_now

log = logging.getLogger("moodmate.chatlog")

__all__ = ["ChatLogRecord", "ChatLogSink", "supabase_writer"]

Writer = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class ChatLogRecord:
    user_id: Optional[str]
    user_message: str
    bot_response: str
    detected_mood: str
    created_at: datetime = field(default_factory=utc_now)

    def to_row(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "user_message": self.user_message,
            "bot_response": self.bot_response,
            "detected_mood": self.detected_mood,
            "created_at": utc_iso(self.created_at),
        }


def supabase_writer(table: Optional[str] = None) -> Writer:
    name = table or get_settings().CHATLOG_TABLE

    def _insert(row: Dict[str, Any]) -> Any:
        return supa().table(name).insert(row).execute()

    return _insert


def _is_async(fn: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


class ChatLogSink:
    def __init__(self, writer: Optional[Writer] = None):
        self._writer = writer or supabase_writer()
        self._pending: Set[asyncio.Task] = set()
        self.written = 0
        self.failed = 0

    @classmethod
    def default(cls) -> "ChatLogSink":
        return cls(supabase_writer())

    async def _write(self, row: Dict[str, Any]) -> None:
        try:
            if _is_async(self._writer):
                await self._writer(row)
            else:
                # supabase-py is sync; keep it off the event loop
                await asyncio.to_thread(self._writer, row)
        except Exception as e:
            raise PersistenceError(f"{type(e).__name__}: {e}") from e

    async def persist(self, record: ChatLogRecord) -> bool:
        """Awaitable best-effort write. Returns True when the row landed."""
        try:
            await self._write(record.to_row())
        except PersistenceError as e:
            self.failed += 1
            log.warning("chat log write failed (user=%s, failures=%d): %s", record.user_id, self.failed, e)
            return False
        self.written += 1
        log.debug("chat log written (user=%s mood=%s)", record.user_id, record.detected_mood)
        return True

    def submit(self, record: ChatLogRecord) -> "asyncio.Task[bool]":
        """Schedule persist() without awaiting it. Must be called from a running loop."""
        task = asyncio.get_running_loop().create_task(self.persist(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self, timeout: float = 10.0) -> None:
        """Wait for outstanding background writes; abandon them after `timeout`."""
        if not self._pending:
            return
        n = len(self._pending)
        _done, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
        if not_done:
            log.warning("chat log drain timed out; %d of %d writes still pending", len(not_done), n)

    def stats(self) -> Dict[str, int]:
        return {"written": self.written, "failed": self.failed, "pending": self.pending}
