"""
Health check endpoint

GET /api/health reports whether the service can reach its database.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from typing import Dict, Any
import time

from scholarship.core.config import settings
from scholarship.core.database import get_session_local
from scholarship.core.logging_config import logger


router = APIRouter(tags=["Health"])


async def check_database() -> Dict[str, Any]:
    """Check database connectivity"""
    start = time.time()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
        }
    except SQLAlchemyError as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "error": str(e),
        }


@router.get("/health")
async def health_check():
    """Service and database status; 503 when the database is unreachable"""
    database = await check_database()
    healthy = database["status"] == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "storage": settings.STORAGE_MODE,
            "database": database,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )
