from __future__ import annotations

from functools import lru_cache

from moodmate.domain.chat.service import ChatService


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    """Process-wide service so every request shares one chat log sink."""
    return ChatService.default()
