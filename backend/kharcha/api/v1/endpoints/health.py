from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.config import settings
from kharcha.core.database import get_db
from kharcha.core.logging_config import logger

router = APIRouter()


@router.get("")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness plus a database round-trip"""
    database = "connected"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check database error: {e}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "app": settings.APP_NAME,
        "version": settings.API_VERSION,
        "database": database,
    }
