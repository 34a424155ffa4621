from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_search.config import get_app_settings
from product_search.schemas.product_search import ErrorResponse


def _configure_logging(log_level: str) -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _error_payload(*, error: str, message: str) -> dict:
    return ErrorResponse(
        error=error,
        message=message,
        timestamp=datetime.now(timezone.utc),
    ).model_dump(mode="json")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    settings = get_app_settings()
    _configure_logging(settings.log_level)

    application = FastAPI(title=settings.title, version=settings.version)
    application.state.started_at = time.monotonic()

    from product_search.api.routers import product_search_router

    application.include_router(product_search_router)

    @application.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            payload = _error_payload(
                error=str(exc.detail["error"]),
                message=str(exc.detail.get("message", "")),
            )
        elif exc.status_code == 404:
            payload = _error_payload(
                error="Route not found",
                message=f"Cannot {request.method} {request.url.path}",
            )
        else:
            payload = _error_payload(error=str(exc.detail), message=str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=payload)

    @application.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logging.getLogger(__name__).error(
            "Unhandled error on %s %s: %s", request.method, request.url.path, exc
        )
        return JSONResponse(
            status_code=500,
            content=_error_payload(error="Internal server error", message="Something went wrong"),
        )

    @application.get("/api/health")
    def healthcheck() -> dict:
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - application.state.started_at, 3),
        }

    @application.get("/")
    def index() -> dict:
        return {
            "message": settings.title,
            "version": settings.version,
            "endpoints": {
                "scrape": "GET /api/scrape?keyword=yourKeyword",
                "health": "GET /api/health",
            },
        }

    return application


app = create_app()
