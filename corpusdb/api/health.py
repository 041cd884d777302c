"""Health check and system info routes."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.config import get_settings
from corpusdb.db.session import get_db
from corpusdb.schemas.schemas import HealthResponse

router = APIRouter(tags=["System"])

settings = get_settings()

logger = logging.getLogger(__name__)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the service and its database.",
)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    db_status = "ok"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        db_status = "error"

    return HealthResponse(
        status="healthy" if db_status == "ok" else "degraded",
        version=settings.app_version,
        database=db_status,
    )


@router.get(
    "/api/info",
    summary="Service information",
    description="Get general information about the service.",
)
async def service_info():
    """Get service information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
        "enumerations": ["roles", "genders", "educations", "regions", "places"],
        "views": ["geo", "speakers", "docs", "doc2speaker"],
        "documentation": "/docs",
    }
