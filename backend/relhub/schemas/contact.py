"""Contact Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - ContactForm.name, TaskCreate.title, InteractionCreate.summary: stripped, non-empty
    - TaskCreate.due_date must parse as a datetime
    - tags arrive as the raw comma-separated string typed in the form
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from relhub.core.contact_forms import ContactDraft
from relhub.core.domain_types import InteractionType, Stage


def _strip_required(v: str, name: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{name} cannot be empty or whitespace")
    return v


class ContactForm(BaseModel):
    """Create/edit contact form."""
    name: str = Field(min_length=1, max_length=200)
    company: str = Field("", max_length=200)
    job_title: str = Field("", max_length=200)
    email: str = Field("", max_length=320)
    phone: str = Field("", max_length=50)
    location: str = Field("", max_length=200)
    notes: str = Field("", max_length=10_000)
    tags: str = Field("", max_length=1000)
    stage: Stage = Stage.LEAD

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v, "name")

    def to_draft(self) -> ContactDraft:
        return ContactDraft(**self.model_dump())


class TaskCreate(BaseModel):
    """New follow-up task. Naive due dates are read in the configured timezone."""
    title: str = Field(min_length=1, max_length=500)
    due_date: datetime

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v, "title")


class InteractionCreate(BaseModel):
    """New logged touchpoint. Omitted date means now."""
    type: InteractionType = InteractionType.CALL
    date: datetime | None = None
    summary: str = Field(min_length=1, max_length=5000)
    next_steps: str | None = Field(None, max_length=2000)

    @field_validator("summary")
    @classmethod
    def strip_summary(cls, v: str) -> str:
        return _strip_required(v, "summary")
