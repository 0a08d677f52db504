from __future__ import annotations
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from moodmate import __version__
from moodmate.adapters.supabase_client import supa_ping
from moodmate.core.config import get_settings
from moodmate.schemas.common import DbHealthResponse, HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
def healthz():
    s = get_settings()
    notes = None if s.GEMINI_API_KEY else "GEMINI_API_KEY not configured"
    return HealthResponse(ok=True, version=__version__, notes=notes)


@router.get("/db", response_model=DbHealthResponse)
def db_health():
    table = get_settings().CHATLOG_TABLE
    if supa_ping(readonly=True, table=table):
        return DbHealthResponse(ok=True, table=table)
    return JSONResponse(
        status_code=503,
        content=DbHealthResponse(ok=False, table=table, detail="Database connection failed").model_dump(),
    )
