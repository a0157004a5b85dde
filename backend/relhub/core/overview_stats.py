"""Overview Stats — pure computation of dashboard metrics from the contact list.

Invariants:
    - Order-independent: any permutation of `contacts` yields the same result
    - sum(stage_counts.values()) == contact_count; "All" is never a key
    - Never raises — unparseable dates simply do not count toward time-based metrics
    - Overdue cutoff is start of today (day granularity), not the current instant

Design Decisions:
    - Pure function over the contact list, not a method on CrmState
    - upcoming_follow_up_count counts contacts, not tasks
"""

from datetime import datetime

from relhub.core.crm_state import Contact, Task
from relhub.core.domain_types import FOLLOW_UP_WINDOW_DAYS, Stage, TOUCH_WINDOW_DAYS
from relhub.core.format_dates import (
    as_aware, calendar_days_between, parse_timestamp, start_of_day,
)


def is_overdue(task: Task, now: datetime) -> bool:
    """Incomplete and due strictly before the start of today."""
    due = parse_timestamp(task.due_date)
    if task.completed or due is None:
        return False
    return as_aware(due) < start_of_day(now)


def is_upcoming_follow_up(task: Task, now: datetime) -> bool:
    """Incomplete, due after the start of today, and within the follow-up window."""
    due = parse_timestamp(task.due_date)
    if task.completed or due is None:
        return False
    today = start_of_day(now)
    return (
        as_aware(due) > today
        and calendar_days_between(due, today, now) <= FOLLOW_UP_WINDOW_DAYS
    )


def is_recent_touch(date: str, now: datetime) -> bool:
    """Within TOUCH_WINDOW_DAYS calendar days of today, past or future."""
    parsed = parse_timestamp(date)
    if parsed is None:
        return False
    return abs(calendar_days_between(now, parsed, now)) <= TOUCH_WINDOW_DAYS


def compute_overview(contacts: list[Contact], now: datetime) -> dict:
    """Compute dashboard metrics. Pure, no IO."""
    stage_counts: dict[str, int] = {}
    for contact in contacts:
        stage_counts[contact.stage.value] = stage_counts.get(contact.stage.value, 0) + 1

    return {
        "contact_count": len(contacts),
        "active_count": sum(1 for c in contacts if c.stage != Stage.WAITING),
        "overdue_task_count": sum(
            1 for c in contacts for t in c.tasks if is_overdue(t, now)
        ),
        "touches_last_7_days": sum(
            1 for c in contacts for i in c.interactions
            if is_recent_touch(i.date, now)
        ),
        "upcoming_follow_up_count": sum(
            1 for c in contacts
            if any(is_upcoming_follow_up(t, now) for t in c.tasks)
        ),
        "stage_counts": stage_counts,
    }
