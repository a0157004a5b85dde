"""Route Dependencies — builds a CrmService per request.

Invariants:
    - One CrmService per request, bound to that request's DB session
    - get_clock returns None in production (service uses the real clock);
      tests override it to pin "now"
"""

from datetime import datetime
from typing import Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from relhub.config import get_settings
from relhub.infrastructure.database import get_db
from relhub.infrastructure.state_gateway import SqlStateGateway
from relhub.services.crm_service import CrmService


def get_clock() -> Callable[[], datetime] | None:
    return None


def get_crm_service(
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] | None = Depends(get_clock),
) -> CrmService:
    settings = get_settings()
    return CrmService(
        SqlStateGateway(db, settings.state_key),
        settings.tzinfo,
        seed_sample_contacts=settings.seed_sample_contacts,
        upcoming_limit=settings.upcoming_task_limit,
        clock=clock,
    )
