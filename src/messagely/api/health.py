"""GET /health: liveness plus a round-trip to the message database.

Runs on the request's own session, so it reports on the same database
the other routes would use. A failed round-trip is reported as
"degraded" with a 200, not raised: the process itself is alive.
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from messagely import __version__
from messagely.db.engine import get_db

logger = structlog.get_logger()

router = APIRouter()


class HealthReport(BaseModel):
    status: str
    server: str = "ok"
    version: str = __version__
    database: str


@router.get("/health", response_model=HealthReport)
async def health_check(db: AsyncSession = Depends(get_db)) -> HealthReport:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("health.database_unreachable", error=str(e))
        return HealthReport(status="degraded", database=f"error: {e.__class__.__name__}")
    return HealthReport(status="healthy", database="ok")
