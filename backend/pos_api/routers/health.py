"""
Health check endpoints for the POS API.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "pos-api",
        "environment": settings.environment,
    }


@router.get("/health/detailed")
def detailed_health_check():
    """
    Health check that verifies the database connection.
    Returns 503 Service Unavailable if the database is down.
    """
    checks = {
        "service": "pos-api",
        "environment": settings.environment,
        "dependencies": {},
        "mirror": {
            "configured": settings.mirror_enabled,
            "auto_sync": settings.mirror_auto_sync,
        },
    }

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
        all_healthy = True
    except SQLAlchemyError as e:
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    checks["status"] = "healthy" if all_healthy else "degraded"

    if not all_healthy:
        return JSONResponse(content=checks, status_code=503)

    return checks
