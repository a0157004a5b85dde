"""Contacts — list, create, read, edit, and delete relationship records.

Invariants:
    - List order is most recently touched first, filtered by stage and search
    - Create and edit respond with the stored record and the contact id to select
    - DELETE is idempotent: an unknown id still returns 200 with the selection pointer
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from relhub.api.dependencies import get_crm_service
from relhub.core.crm_state_snapshot import contact_to_snapshot
from relhub.core.domain_types import (
    STAGE_FILTER_ALL, STAGE_FILTER_OPTIONS, ContactId,
)
from relhub.schemas.contact import ContactForm
from relhub.services.crm_service import CrmService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/contacts", tags=["contacts"])

_STAGE_PATTERN = "^(" + "|".join(STAGE_FILTER_OPTIONS) + ")$"


@router.get("")
async def list_contacts(
    search: str = Query("", max_length=200),
    stage: str = Query(STAGE_FILTER_ALL, pattern=_STAGE_PATTERN),
    service: CrmService = Depends(get_crm_service),
):
    """Relationship list rows matching the search box and stage chip."""
    return await service.list_contacts(search, stage)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactForm, service: CrmService = Depends(get_crm_service),
):
    """Create a contact from the form and select it."""
    contact = await service.create_contact(body.to_draft())
    return {
        "contact": contact_to_snapshot(contact),
        "selected_contact_id": contact.id,
    }


@router.get("/{contact_id}")
async def get_contact(
    contact_id: str, service: CrmService = Depends(get_crm_service),
):
    """Full profile with sorted tasks and timeline."""
    return await service.contact_detail(ContactId(contact_id))


@router.put("/{contact_id}")
async def update_contact(
    contact_id: str,
    body: ContactForm,
    service: CrmService = Depends(get_crm_service),
):
    """Replace the editable fields of an existing contact."""
    contact = await service.update_contact(ContactId(contact_id), body.to_draft())
    return {
        "contact": contact_to_snapshot(contact),
        "selected_contact_id": contact.id,
    }


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: str,
    selected: str | None = Query(None),
    service: CrmService = Depends(get_crm_service),
):
    """Delete a contact with its tasks and interactions."""
    next_selected = await service.delete_contact(
        ContactId(contact_id), ContactId(selected) if selected else None,
    )
    return {"deleted": contact_id, "selected_contact_id": next_selected}
