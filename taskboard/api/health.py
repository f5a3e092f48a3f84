"""Health check endpoints for container probes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..db.session import get_session

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Liveness probe.
    Returns 200 OK if the service is running.
    """
    return {"status": "healthy", "service": "taskboard"}


@router.get("/ready")
async def readiness_check(db: Session = Depends(get_session)):
    """
    Readiness probe.
    Returns 200 OK once the database answers a trivial query, 503 otherwise.
    """
    try:
        db.exec(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "service": "taskboard"},
        )
    return {"status": "ready", "service": "taskboard"}
