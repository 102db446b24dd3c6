"""
Health Check Endpoints

Endpoints:
- GET /api/health - Basic health check
- GET /api/health/ready - Readiness probe (database reachable)
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tutor.config import settings
from tutor.db.base import get_db

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
    }


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Readiness probe: the service is ready when PostgreSQL answers."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "not_ready", "postgres": {"status": "unhealthy", "error": str(e)}}
    return {"status": "ready", "postgres": {"status": "healthy"}}
