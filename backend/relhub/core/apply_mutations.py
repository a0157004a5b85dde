"""Mutation Operations — pure state transitions over CrmState.

Invariants:
    - Every operation returns a new CrmState; the input state and any record
      passed in are never modified, and the result shares no mutable objects
      with them
    - upsert_* replaces on id match, otherwise inserts (contacts prepend,
      tasks and interactions append)
    - upsert_interaction sets last_interaction to the interaction date
      unconditionally, even when that date is older than the current value
    - delete_contact on an unknown id is a no-op
    - toggle_task on an unknown contact or task is a no-op
    - upsert_task / upsert_interaction on an unknown contact raise NotFoundError

Design Decisions:
    - Deep copy on entry; no structural sharing between input and result
"""

import copy
from dataclasses import replace

from relhub.core.crm_state import Contact, CrmState, Interaction, Task
from relhub.core.domain_types import ContactId, TaskId
from relhub.core.errors import ErrorContext, NotFoundError, ValidationError


def _require_contact(state: CrmState, contact_id: ContactId) -> Contact:
    contact = state.find_contact(contact_id)
    if contact is None:
        raise NotFoundError(
            "Contact", contact_id, ErrorContext(contact_id=contact_id),
        )
    return contact


def _upsert_by_id(items: list, item) -> list:
    """Replace the element with item.id, or append."""
    if any(existing.id == item.id for existing in items):
        return [item if existing.id == item.id else existing for existing in items]
    return [*items, item]


def upsert_contact(state: CrmState, contact: Contact) -> tuple[CrmState, ContactId]:
    """Replace a contact by id, or prepend a new one. Returns (new_state, contact_id)."""
    if not contact.name or not contact.name.strip():
        raise ValidationError(
            "Contact name is required", "name", ErrorContext(contact_id=contact.id),
        )
    incoming = copy.deepcopy(contact)
    next_state = copy.deepcopy(state)
    if next_state.find_contact(incoming.id) is not None:
        next_state.contacts = [
            incoming if c.id == incoming.id else c for c in next_state.contacts
        ]
    else:
        next_state.contacts = [incoming, *next_state.contacts]
    return next_state, incoming.id


def delete_contact(state: CrmState, contact_id: ContactId) -> CrmState:
    """Remove a contact and everything it owns. Unknown id is a no-op."""
    next_state = copy.deepcopy(state)
    next_state.contacts = [c for c in next_state.contacts if c.id != contact_id]
    return next_state


def select_after_delete(
    state: CrmState, deleted_id: ContactId, selected_id: ContactId | None,
) -> ContactId | None:
    """Selection pointer after deleting `deleted_id` from `state`."""
    if selected_id != deleted_id:
        return selected_id
    return state.contacts[0].id if state.contacts else None


def upsert_task(state: CrmState, contact_id: ContactId, task: Task) -> CrmState:
    """Replace a task by id within the contact, or append it."""
    next_state = copy.deepcopy(state)
    contact = _require_contact(next_state, contact_id)
    contact.tasks = _upsert_by_id(contact.tasks, copy.deepcopy(task))
    return next_state


def toggle_task(state: CrmState, contact_id: ContactId, task_id: TaskId) -> CrmState:
    """Flip a task's completed flag. Missing contact or task is a no-op."""
    next_state = copy.deepcopy(state)
    contact = next_state.find_contact(contact_id)
    if contact is None:
        return next_state
    contact.tasks = [
        replace(t, completed=not t.completed) if t.id == task_id else t
        for t in contact.tasks
    ]
    return next_state


def upsert_interaction(
    state: CrmState, contact_id: ContactId, interaction: Interaction,
) -> CrmState:
    """Replace an interaction by id or append it; stamp last_interaction."""
    next_state = copy.deepcopy(state)
    contact = _require_contact(next_state, contact_id)
    contact.interactions = _upsert_by_id(
        contact.interactions, copy.deepcopy(interaction),
    )
    contact.last_interaction = interaction.date
    return next_state
