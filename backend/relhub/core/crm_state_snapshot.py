"""CRM State Snapshot — serialization / deserialization for CrmState.

Invariants:
    - state_to_snapshot produces a JSON-safe dict: {"contacts": [...]} with
      camelCase record keys (jobTitle, createdAt, lastInteraction, dueDate, nextSteps)
    - state_from_snapshot(state_to_snapshot(s)) == s for any valid state
    - Missing optional string fields fall back to ""; a missing nextSteps stays None
    - Structural problems (wrong shapes, unknown enum values, duplicate ids,
      missing ids, a non-boolean completed flag) raise SnapshotError

Design Decisions:
    - nextSteps is omitted rather than written as null when absent
    - Timestamps are copied verbatim; a malformed date is not a decode error
"""

from relhub.core.crm_state import Contact, CrmState, Interaction, Task
from relhub.core.domain_types import (
    ContactId, InteractionId, InteractionType, Stage, TaskId,
)
from relhub.core.errors import SnapshotError

_CONTACT_TEXT_FIELDS: dict[str, str] = {
    "company": "company", "jobTitle": "job_title", "email": "email",
    "phone": "phone", "location": "location", "notes": "notes",
}


# ─── Encode ─────────────────────────────────────────────────────

def interaction_to_snapshot(interaction: Interaction) -> dict:
    data = {
        "id": interaction.id,
        "date": interaction.date,
        "type": interaction.type.value,
        "summary": interaction.summary,
    }
    if interaction.next_steps is not None:
        data["nextSteps"] = interaction.next_steps
    return data


def task_to_snapshot(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "dueDate": task.due_date,
        "completed": task.completed,
    }


def contact_to_snapshot(contact: Contact) -> dict:
    """Serialize one contact with its owned records. Pure, no IO."""
    return {
        "id": contact.id,
        "name": contact.name,
        "company": contact.company,
        "jobTitle": contact.job_title,
        "email": contact.email,
        "phone": contact.phone,
        "location": contact.location,
        "notes": contact.notes,
        "tags": list(contact.tags),
        "stage": contact.stage.value,
        "createdAt": contact.created_at,
        "lastInteraction": contact.last_interaction,
        "interactions": [interaction_to_snapshot(i) for i in contact.interactions],
        "tasks": [task_to_snapshot(t) for t in contact.tasks],
    }


def state_to_snapshot(state: CrmState) -> dict:
    """Serialize CrmState to the storage schema. Pure, no IO."""
    return {"contacts": [contact_to_snapshot(c) for c in state.contacts]}


# ─── Decode ─────────────────────────────────────────────────────

def _require_dict(value: object, what: str) -> dict:
    if not isinstance(value, dict):
        raise SnapshotError(f"{what} must be an object")
    return value


def _require_list(value: object, what: str) -> list:
    if not isinstance(value, list):
        raise SnapshotError(f"{what} must be a list")
    return value


def _require_id(data: dict, what: str) -> str:
    value = data.get("id")
    if not isinstance(value, str) or not value:
        raise SnapshotError(f"{what} is missing an id")
    return value


def _text(data: dict, key: str) -> str:
    value = data.get(key, "")
    return value if isinstance(value, str) else str(value)


def _unique_ids(ids: list[str], what: str) -> None:
    if len(set(ids)) != len(ids):
        raise SnapshotError(f"duplicate {what} ids")


def interaction_from_snapshot(data: object) -> Interaction:
    raw = _require_dict(data, "interaction")
    try:
        kind = InteractionType(raw.get("type"))
    except ValueError:
        raise SnapshotError(f"unknown interaction type {raw.get('type')!r}")
    next_steps = raw.get("nextSteps")
    return Interaction(
        id=InteractionId(_require_id(raw, "interaction")),
        date=_text(raw, "date"),
        type=kind,
        summary=_text(raw, "summary"),
        next_steps=next_steps if isinstance(next_steps, str) else None,
    )


def task_from_snapshot(data: object) -> Task:
    raw = _require_dict(data, "task")
    task_id = _require_id(raw, "task")
    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise SnapshotError(f"task {task_id!r} has a non-boolean completed flag")
    return Task(
        id=TaskId(task_id),
        title=_text(raw, "title"),
        due_date=_text(raw, "dueDate"),
        completed=completed,
    )


def contact_from_snapshot(data: object) -> Contact:
    """Reconstruct one contact. Raises SnapshotError on structural problems."""
    raw = _require_dict(data, "contact")
    contact_id = ContactId(_require_id(raw, "contact"))
    try:
        stage = Stage(raw.get("stage", Stage.LEAD.value))
    except ValueError:
        raise SnapshotError(f"unknown stage {raw.get('stage')!r}")

    interactions = [
        interaction_from_snapshot(i)
        for i in _require_list(raw.get("interactions", []), "interactions")
    ]
    tasks = [task_from_snapshot(t) for t in _require_list(raw.get("tasks", []), "tasks")]
    _unique_ids([i.id for i in interactions], f"interaction (contact {contact_id})")
    _unique_ids([t.id for t in tasks], f"task (contact {contact_id})")

    tags = _require_list(raw.get("tags", []), "tags")
    return Contact(
        id=contact_id,
        name=_text(raw, "name"),
        created_at=_text(raw, "createdAt"),
        last_interaction=_text(raw, "lastInteraction"),
        tags=[str(t) for t in tags],
        stage=stage,
        interactions=interactions,
        tasks=tasks,
        **{attr: _text(raw, key) for key, attr in _CONTACT_TEXT_FIELDS.items()},
    )


def state_from_snapshot(snapshot: object) -> CrmState:
    """Reconstruct CrmState from a storage dict. Raises SnapshotError."""
    raw = _require_dict(snapshot, "snapshot")
    contacts = [
        contact_from_snapshot(c)
        for c in _require_list(raw.get("contacts"), "contacts")
    ]
    _unique_ids([c.id for c in contacts], "contact")
    return CrmState(contacts=contacts)
