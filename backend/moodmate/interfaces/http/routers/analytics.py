from __future__ import annotations
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from moodmate.domain.analytics.aggregations import mood_summary, recent_exchanges
from moodmate.interfaces.http.deps.auth import get_current_user
from moodmate.schemas.chat import MoodSummaryOut

router = APIRouter()


@router.get("/moods", response_model=MoodSummaryOut)
def moods(days: int = Query(30, ge=1, le=90), user: Dict[str, Any] = Depends(get_current_user)):
    return mood_summary(user["id"], days=days)


@router.get("/recent")
def recent(n: int = Query(20, ge=1, le=200), user: Dict[str, Any] = Depends(get_current_user)):
    return {"items": recent_exchanges(user["id"], n=n)}
