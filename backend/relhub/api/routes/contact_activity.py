"""Contact Activity — follow-up tasks and logged interactions for one contact.

Invariants:
    - Unknown contact → 404 for every route here
    - Toggling an unknown task → 404 (the stored state is left unchanged)
    - Logging an interaction moves the contact's last-touch to that interaction's date
"""

import logging

from fastapi import APIRouter, Depends, status

from relhub.api.dependencies import get_crm_service
from relhub.core.crm_state_snapshot import interaction_to_snapshot, task_to_snapshot
from relhub.core.domain_types import ContactId, TaskId
from relhub.schemas.contact import InteractionCreate, TaskCreate
from relhub.services.crm_service import CrmService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/contacts/{contact_id}", tags=["activity"])


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def add_task(
    contact_id: str,
    body: TaskCreate,
    service: CrmService = Depends(get_crm_service),
):
    """Add a follow-up task."""
    task = await service.add_task(ContactId(contact_id), body.title, body.due_date)
    return task_to_snapshot(task)


@router.post("/tasks/{task_id}/toggle")
async def toggle_task(
    contact_id: str,
    task_id: str,
    service: CrmService = Depends(get_crm_service),
):
    """Mark a task done, or reopen it."""
    task = await service.toggle_task(ContactId(contact_id), TaskId(task_id))
    return task_to_snapshot(task)


@router.post("/interactions", status_code=status.HTTP_201_CREATED)
async def log_interaction(
    contact_id: str,
    body: InteractionCreate,
    service: CrmService = Depends(get_crm_service),
):
    """Log a call, email, meeting, or note."""
    interaction = await service.log_interaction(
        ContactId(contact_id), body.type, body.date, body.summary, body.next_steps,
    )
    return interaction_to_snapshot(interaction)
