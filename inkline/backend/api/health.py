"""
Health probes, mounted outside the /api/v1 prefix.

    GET /health        process is up
    GET /health/ready  database answers within timeouts.database seconds
"""

import asyncio
import time
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from inkline.backend.core.config import get_app_config
from inkline.backend.core.database import get_session_factory
from inkline.backend.core.logging import get_logger
from inkline.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database() -> dict[str, Any]:
    started = time.perf_counter()
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database probe failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy", "latency_ms": int((time.perf_counter() - started) * 1000)}


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> JSONResponse:
    """503 with the failing check when the database is unreachable or slow."""
    try:
        async with asyncio.timeout(get_app_config().application.timeouts.database):
            database = await check_database()
    except TimeoutError:
        database = {"status": "unhealthy", "error": "timed out"}

    healthy = database.get("status") == "healthy"
    if not healthy:
        logger.warning("Not ready", extra={"database": database})
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "checks": {"database": database},
            "timestamp": utc_now().isoformat(),
        },
    )
