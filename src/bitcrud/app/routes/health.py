"""
Health check endpoint handler.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ...core.config import settings
from ...core.database import ping_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.
    Checks database connectivity.
    """
    health_status = {
        "status": "healthy",
        "version": settings.api.app_version,
        "services": {"database": {"status": "healthy"}},
    }

    try:
        await ping_db()
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        health_status["services"]["database"] = {
            "status": "unhealthy",
            "error": str(e),
        }
        health_status["status"] = "degraded"
        return JSONResponse(health_status, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return health_status
