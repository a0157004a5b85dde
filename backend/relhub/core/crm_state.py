"""CRM State — the entity records and the single state value they live in.

Invariants:
    - CrmState.contacts is ordered: new contacts at the front, otherwise stable
    - Contact ids are unique; task ids and interaction ids are unique per contact
    - A contact exclusively owns its tasks and interactions
    - Timestamps are ISO-8601 strings; a malformed value is kept as-is and
      handled by the view layer (see format_dates.parse_timestamp)

Design Decisions:
    - Plain dataclasses, no IO; mutation functions return new instances
      (apply_mutations.py) and never modify these in place
"""

from dataclasses import dataclass, field

from relhub.core.domain_types import (
    ContactId, InteractionId, InteractionType, Stage, TaskId,
)


@dataclass
class Interaction:
    """A logged touchpoint with a contact."""
    id: InteractionId
    date: str
    type: InteractionType
    summary: str
    next_steps: str | None = None


@dataclass
class Task:
    """A follow-up action item for a contact."""
    id: TaskId
    title: str
    due_date: str
    completed: bool = False


@dataclass
class Contact:
    """A tracked relationship and everything logged against it."""
    id: ContactId
    name: str
    created_at: str
    last_interaction: str
    company: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    notes: str = ""
    tags: list[str] = field(default_factory=list)
    stage: Stage = Stage.LEAD
    interactions: list[Interaction] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    def find_task(self, task_id: TaskId) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)


@dataclass
class CrmState:
    """The complete persisted collection of contacts."""
    contacts: list[Contact] = field(default_factory=list)

    def find_contact(self, contact_id: ContactId) -> Contact | None:
        """Return the contact with this id, or None."""
        return next((c for c in self.contacts if c.id == contact_id), None)

    @property
    def contact_ids(self) -> list[ContactId]:
        return [c.id for c in self.contacts]
