"""
Liveness endpoint for container health checks and load balancers.

Always answers 200; a failing dependency shows up as status "degraded".
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from salestrainer.api.deps import get_app_settings
from salestrainer.core.config import Settings
from salestrainer.core.db import get_db

router = APIRouter(prefix="/api", tags=["health"])

# Set by the lifespan handler
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Round-trip a SELECT 1 and time it."""
    started = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as exc:
        return {
            "status": "down",
            "response_time_ms": int((time.perf_counter() - started) * 1000),
            "error": type(exc).__name__,
        }
    return {
        "status": "ok",
        "response_time_ms": int((time.perf_counter() - started) * 1000),
    }


@router.get("/health", summary="Health check")
async def health_check(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    database = await check_database(db)
    return {
        "status": "ok" if database["status"] == "ok" else "degraded",
        "uptime_seconds": get_uptime_seconds(),
        "checks": {
            "database": database,
            "generative": {"status": "ok" if settings.openai_api_key else "unconfigured"},
        },
    }
