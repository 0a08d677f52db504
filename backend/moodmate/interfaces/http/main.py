# backend/moodmate/interfaces/http/main.py
from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from moodmate import __version__
from moodmate.core.config import get_settings
from moodmate.core.events import register_lifecycle
from moodmate.schemas.common import ErrorResponse

logger = logging.getLogger("moodmate")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.APP_NAME, version=__version__)
    register_lifecycle(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins() if settings.ENV == "production" else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/_/ping")
    def _ping():
        return {"ok": True}

    # Every error response carries a request_id that also appears in the logs.

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        req_id = str(uuid.uuid4())
        logger.warning("HTTPException %s %s %s", req_id, exc.status_code, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error="http_error", message=str(exc.detail), request_id=req_id).model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        req_id = str(uuid.uuid4())
        logger.warning("ValidationError %s %s", req_id, exc)
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error="validation_error",
                message="Invalid request payload",
                request_id=req_id,
                meta={"details": jsonable_encoder(exc.errors())},
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        req_id = str(uuid.uuid4())
        logger.exception("Unhandled exception %s %s", req_id, exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="server_error",
                message="Server error",
                request_id=req_id,
                meta={"type": exc.__class__.__name__},
            ).model_dump(exclude_none=True),
        )

    from moodmate.interfaces.http.routers import api

    app.include_router(api)
    return app


app = create_app()


def run() -> None:
    import os
    import uvicorn

    debug = get_settings().DEBUG
    uvicorn.run(
        "moodmate.interfaces.http.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=debug,
        log_level="debug" if debug else "info",
    )


if __name__ == "__main__":
    run()
