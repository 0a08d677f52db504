from __future__ import annotations
from fastapi import APIRouter

from . import analytics, chat, external, health

api = APIRouter()
api.include_router(health.router,    prefix="/health",    tags=["health"])
api.include_router(chat.router,      prefix="/chat",      tags=["chat"])
api.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api.include_router(external.router,  prefix="/external",  tags=["external"])
