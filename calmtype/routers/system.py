"""Health and database connectivity checks."""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from calmtype.routers.deps import Db
from calmtype.services.common import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
async def health():
    return {"status": "OK", "timestamp": utcnow().isoformat()}


@router.get("/test-db")
async def test_db(db: Db):
    try:
        current_time = await db.server_time()
    except SQLAlchemyError as exc:
        logger.error("Database test error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Database connection failed", "details": str(exc)},
        )
    return {
        "status": "Database connected",
        "backend": db.backend,
        "current_time": current_time,
        "timestamp": utcnow().isoformat(),
    }
