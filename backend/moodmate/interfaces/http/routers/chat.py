from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from moodmate import modes
from moodmate.domain.chat.service import ChatService
from moodmate.interfaces.http.deps.auth import get_current_user
from moodmate.interfaces.http.deps.services import get_chat_service
from moodmate.schemas.chat import ChatIn, ChatOut, ModeInfo, ModeRequest

router = APIRouter()


@router.get("/modes", response_model=List[ModeInfo])
def list_modes():
    return modes.available()


@router.post("", response_model=ChatOut, response_model_exclude_none=True)
async def chat(
    body: ChatIn,
    user: Dict[str, Any] = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """
    Action buttons (mood check-in, affirmations) send an empty message with a
    mode; plain chat needs text.
    """
    mode = modes.normalize(body.mode)
    message = (body.message or "").strip()
    if not message and mode == modes.DEFAULT_MODE:
        raise HTTPException(status_code=400, detail="Missing message")
    req = ModeRequest(message=message, history=body.chatHistory, user_id=user.get("id"), mode=mode)
    return await service.get_bot_response(req)
