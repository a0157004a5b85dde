"""Health & Readiness Probes.

Invariants:
    - GET /health/ returns 200 whenever the process is up
    - GET /health/ready returns 503 when the database does not answer;
      otherwise 200, reporting whether a CRM state row exists for the configured key
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import select

from relhub.config import get_settings
from relhub.infrastructure import database
from relhub.models.crm_state_snapshot import CrmStateSnapshot

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "relhub-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    """Database ping plus whether state has been saved yet."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )

    key = get_settings().state_key
    async with manager.session() as db:
        stored = await db.scalar(
            select(CrmStateSnapshot.key).where(CrmStateSnapshot.key == key),
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "state": "stored" if stored is not None else "empty",
        },
    }
