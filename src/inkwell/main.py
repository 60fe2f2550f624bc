# src/inkwell/main.py
"""Main entry point for the Inkwell application."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell.api.envelope import error_response
from inkwell.api.v1 import posts_router, system_router, uploads_router
from inkwell.core.errors import AuthError, NotFoundError
from inkwell.core.logging import configure_logging
from inkwell.core.settings import settings
from inkwell.db.schema import verify_schema
from inkwell.db.session import check_connection, engine

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: AuthError.code,
    status.HTTP_403_FORBIDDEN: AuthError.code,
    status.HTTP_404_NOT_FOUND: NotFoundError.code,
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}

# Initialize FastAPI app
app = FastAPI(
    title="Inkwell API",
    description="Backend for a single-author blog",
    version=settings.app_version,
)

# Add CORS middleware for the single-page client
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")
app.include_router(system_router, prefix="/api")


@app.middleware("http")
async def log_requests(request: Request, call_next: Any) -> Any:
    """Log one line per request with status and duration."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s %d %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests (bad JSON, missing body) in the envelope."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "payload",
            "reason": error.get("msg", "invalid value"),
        }
        for error in exc.errors()
    ]
    logger.warning("Malformed request to %s: %s", request.url.path, errors)
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Malformed request.", "validation_error", errors=errors
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (auth, unknown routes) in the envelope."""
    response = error_response(
        exc.status_code,
        str(exc.detail),
        HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures in full and return a coarse 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "internal_error"
    )


@app.on_event("startup")
async def on_startup() -> None:
    """Gate request acceptance on a reachable, correctly migrated database."""
    configure_logging()
    if settings.verify_schema_on_startup:
        check_connection()
        verify_schema(engine)
    logger.info("%s %s ready on port %d", settings.app_name, settings.app_version, settings.port)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    engine.dispose()
    logger.info("Database connections closed")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "inkwell.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    run()
