from __future__ import annotations
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from moodmate.domain.external.service import ExternalContentService
from moodmate.interfaces.http.deps.auth import get_current_user
from moodmate.schemas.chat import MusicContent, NewsContent

router = APIRouter()


def get_external_service() -> ExternalContentService:
    return ExternalContentService()


@router.get("/news", response_model=NewsContent, response_model_exclude_none=True)
async def news(
    user: Dict[str, Any] = Depends(get_current_user),
    svc: ExternalContentService = Depends(get_external_service),
):
    return await svc.news()


@router.get("/playlists", response_model=MusicContent, response_model_exclude_none=True)
async def playlists(
    genre: Optional[str] = Query(None, min_length=1, max_length=40),
    mood: Optional[str] = Query(None, min_length=1, max_length=40),
    user: Dict[str, Any] = Depends(get_current_user),
    svc: ExternalContentService = Depends(get_external_service),
):
    """Explicit `genre` wins; otherwise `mood` picks the seed genres; otherwise chill."""
    return await svc.music(genre=genre, mood=mood)
