"""Contact Forms — turn raw form input into validated records.

Invariants:
    - Validation happens here, before any mutation is built (all-or-nothing)
    - Required: contact name, task title, task due date (parseable), interaction summary
    - New contacts get a uuid4 id and created_at == last_interaction == now
    - Tags: comma-split, stripped, empties dropped; order and duplicates kept
    - Stored timestamps are UTC ISO strings with millisecond precision and Z
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo

from relhub.core.crm_state import Contact, Interaction, Task
from relhub.core.domain_types import (
    ContactId, InteractionId, InteractionType, Stage, TaskId,
)
from relhub.core.errors import ValidationError
from relhub.core.format_dates import parse_timestamp, to_iso


@dataclass
class ContactDraft:
    """Editable contact fields as entered in the contact form."""
    name: str
    company: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    notes: str = ""
    tags: str = ""
    stage: Stage = Stage.LEAD


def new_id() -> str:
    return str(uuid.uuid4())


def split_tags(raw: str) -> list[str]:
    """'a, b,,c ' -> ['a', 'b', 'c']."""
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _require_text(value: str | None, field: str, label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required", field)
    return value


def _coerce_stage(stage: Stage | str) -> Stage:
    try:
        return Stage(stage)
    except ValueError:
        raise ValidationError(f"Unknown stage {stage!r}", "stage")


def _draft_fields(draft: ContactDraft) -> dict:
    return {
        "name": _require_text(draft.name, "name", "Name"),
        "company": draft.company,
        "job_title": draft.job_title,
        "email": draft.email,
        "phone": draft.phone,
        "location": draft.location,
        "notes": draft.notes,
        "tags": split_tags(draft.tags),
        "stage": _coerce_stage(draft.stage),
    }


def create_contact(draft: ContactDraft, now: datetime) -> Contact:
    """New contact record from the create form."""
    stamp = to_iso(now)
    return Contact(
        id=ContactId(new_id()),
        created_at=stamp,
        last_interaction=stamp,
        interactions=[],
        tasks=[],
        **_draft_fields(draft),
    )


def apply_contact_draft(contact: Contact, draft: ContactDraft) -> Contact:
    """Edited copy of `contact`; id, timestamps, tasks and interactions are kept."""
    return replace(
        contact,
        interactions=list(contact.interactions),
        tasks=list(contact.tasks),
        **_draft_fields(draft),
    )


def _localize(value: datetime, tz: tzinfo | None) -> datetime:
    # naive form input is wall-clock time in the user's timezone
    if value.tzinfo is None and tz is not None:
        return value.replace(tzinfo=tz)
    return value


def build_task(
    title: str | None, due_date: str | datetime | None, tz: tzinfo | None = None,
) -> Task:
    """New, incomplete task. Raises ValidationError on missing title or bad due date."""
    title = _require_text(title, "title", "Task title")
    parsed = parse_timestamp(due_date)
    if parsed is None:
        raise ValidationError("Task due date is required and must be a date", "due_date")
    return Task(
        id=TaskId(new_id()),
        title=title,
        due_date=to_iso(_localize(parsed, tz)),
        completed=False,
    )


def build_interaction(
    kind: InteractionType | str,
    date: str | datetime | None,
    summary: str | None,
    next_steps: str | None,
    now: datetime,
) -> Interaction:
    """New interaction. Missing date means `now`; blank next steps are dropped."""
    summary = _require_text(summary, "summary", "Interaction summary")
    try:
        kind = InteractionType(kind)
    except ValueError:
        raise ValidationError(f"Unknown interaction type {kind!r}", "type")

    if date is None or (isinstance(date, str) and not date.strip()):
        when = now
    else:
        when = parse_timestamp(date)
        if when is None:
            raise ValidationError("Interaction date must be a date", "date")
        when = _localize(when, now.tzinfo)

    return Interaction(
        id=InteractionId(new_id()),
        date=to_iso(when),
        type=kind,
        summary=summary,
        next_steps=next_steps if next_steps and next_steps.strip() else None,
    )
