from __future__ import annotations
from typing import Optional, Dict, Any
from pydantic import BaseModel


class HealthResponse(BaseModel):
    ok: bool = True
    version: Optional[str] = None
    notes: Optional[str] = None


class DbHealthResponse(BaseModel):
    ok: bool
    table: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    request_id: str
    meta: Optional[Dict[str, Any]] = None
