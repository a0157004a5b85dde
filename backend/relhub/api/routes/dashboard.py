"""Dashboard — pipeline overview metrics and the upcoming task list."""

import logging

from fastapi import APIRouter, Depends

from relhub.api.dependencies import get_crm_service
from relhub.schemas.dashboard import DashboardResponse
from relhub.services.crm_service import CrmService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(service: CrmService = Depends(get_crm_service)):
    """Overview cards, pipeline snapshot, and soonest open tasks."""
    return await service.dashboard()
