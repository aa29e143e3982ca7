"""Health check endpoint."""

import logging

from fastapi import APIRouter
from sqlalchemy import text

from app_builder.core.config import settings
from app_builder.db.session import engine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """Check the published-app database and the builder state store."""
    db_status = "ok"
    state_status = "ok"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("Health check: database unreachable: %s", exc)
        db_status = "error"

    if settings.STATE_BACKEND == "redis":
        try:
            import redis.asyncio as aioredis

            r = aioredis.from_url(settings.REDIS_URL)
            await r.ping()
            await r.aclose()
        except Exception as exc:
            logger.warning("Health check: redis unreachable: %s", exc)
            state_status = "error"

    status = "ok" if db_status == "ok" and state_status == "ok" else "degraded"
    return {
        "status": status,
        "db": db_status,
        "stateStore": settings.STATE_BACKEND,
        "redis": state_status,
        "version": "0.1.0",
    }
