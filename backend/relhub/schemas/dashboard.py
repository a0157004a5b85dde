"""Dashboard Schemas — response models for the overview endpoint."""

from pydantic import BaseModel


class Overview(BaseModel):
    contact_count: int
    active_count: int
    overdue_task_count: int
    touches_last_7_days: int
    upcoming_follow_up_count: int
    stage_counts: dict[str, int]


class UpcomingTaskCard(BaseModel):
    contact_id: str
    contact_name: str
    stage: str
    task_id: str
    title: str
    due_date: str
    due_label: str


class DashboardResponse(BaseModel):
    overview: Overview
    upcoming_tasks: list[UpcomingTaskCard]
