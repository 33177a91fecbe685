"""
Liveness, readiness and database health.
"""
import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from projectit import __version__
from projectit.core.database import get_db
from projectit.schemas.health import HealthResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/", response_model=HealthResponse)
async def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """Service status plus a round trip to the entity database."""
    try:
        db.execute(text("SELECT 1"))
        database = "healthy"
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        database = "unhealthy"

    return HealthResponse(status="healthy", database=database, version=__version__)


@router.get("/ready")
async def readiness_check() -> dict:
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict:
    return {"status": "alive"}
