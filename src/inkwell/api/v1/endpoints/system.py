"""System endpoints for operators."""

from __future__ import annotations

import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from inkwell.api.v1.dependencies import SessionDep
from inkwell.core.settings import settings

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
def get_system_health(db: SessionDep) -> JSONResponse:
    """Report database connectivity for monitoring.

    Returns:
        200 when the database answers, 503 otherwise
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        db_status = "unhealthy"

    healthy = db_status == "healthy"
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": int(time.time()),
            "components": {"database": db_status},
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )
