"""Contact Views — filtered lists, sorted sub-collections, and row/detail view models.

Invariants:
    - Pure: inputs are never modified, outputs are new lists
    - All sorts are stable; equal timestamps keep their prior relative order
    - Unparseable timestamps sort after every parseable one, in both directions
    - Search matches a case-insensitive substring of
      "name company job_title email tags..." joined by single spaces
"""

from datetime import datetime

from relhub.core.crm_state import Contact, Interaction, Task
from relhub.core.crm_state_snapshot import contact_to_snapshot
from relhub.core.domain_types import (
    STAGE_FILTER_ALL, UPCOMING_TASK_LIMIT, VISIBLE_TAG_COUNT,
)
from relhub.core.format_dates import (
    NO_OPEN_TASKS_LABEL, due_badge_label, due_distance_label, last_touch_label,
    stamp_label, timestamp_value,
)


# ─── Sort keys ──────────────────────────────────────────────────

def _newest_first_key(value: str) -> tuple[bool, float]:
    # used with reverse=True: unparseable values get (False, 0.0) and land last
    ts = timestamp_value(value)
    return (ts is not None, ts or 0.0)


def _oldest_first_key(value: str) -> tuple[bool, float]:
    ts = timestamp_value(value)
    return (ts is None, ts or 0.0)


# ─── Filtering ──────────────────────────────────────────────────

def search_haystack(contact: Contact) -> str:
    """Lower-cased text the search box matches against."""
    return " ".join([
        contact.name,
        contact.company,
        contact.job_title,
        contact.email,
        " ".join(contact.tags),
    ]).lower()


def matches_filters(contact: Contact, search_term: str, stage_filter: str) -> bool:
    """Stage predicate AND search predicate."""
    matches_stage = stage_filter == STAGE_FILTER_ALL or contact.stage == stage_filter
    query = search_term.strip().lower()
    matches_search = not query or query in search_haystack(contact)
    return matches_stage and matches_search


def filter_and_sort_contacts(
    contacts: list[Contact], search_term: str = "", stage_filter: str = STAGE_FILTER_ALL,
) -> list[Contact]:
    """Contacts passing both filters, most recently touched first."""
    kept = [c for c in contacts if matches_filters(c, search_term, stage_filter)]
    return sorted(
        kept, key=lambda c: _newest_first_key(c.last_interaction), reverse=True,
    )


# ─── Per-contact collections ────────────────────────────────────

def sorted_tasks(contact: Contact) -> list[Task]:
    """Tasks in ascending due order."""
    return sorted(contact.tasks, key=lambda t: _oldest_first_key(t.due_date))


def sorted_interactions(contact: Contact) -> list[Interaction]:
    """Interactions newest first."""
    return sorted(
        contact.interactions, key=lambda i: _newest_first_key(i.date), reverse=True,
    )


def open_task_count(contact: Contact) -> int:
    return sum(1 for t in contact.tasks if not t.completed)


def default_due_task(contact: Contact) -> Task | None:
    """Earliest-due incomplete task, used for list-row badges."""
    open_tasks = [t for t in contact.tasks if not t.completed]
    if not open_tasks:
        return None
    return sorted(open_tasks, key=lambda t: _oldest_first_key(t.due_date))[0]


def upcoming_tasks(
    contacts: list[Contact], limit: int = UPCOMING_TASK_LIMIT,
) -> list[tuple[Contact, Task]]:
    """Incomplete tasks across all contacts, soonest first, capped at `limit`."""
    pairs = [
        (contact, task)
        for contact in contacts
        for task in contact.tasks
        if not task.completed
    ]
    pairs.sort(key=lambda pair: _oldest_first_key(pair[1].due_date))
    return pairs[:limit]


# ─── View models ────────────────────────────────────────────────

def build_contact_row(contact: Contact, now: datetime) -> dict:
    """Summary shown for one contact in the relationship list."""
    due_task = default_due_task(contact)
    return {
        "id": contact.id,
        "name": contact.name,
        "subtitle": f"{contact.job_title} · {contact.company}",
        "stage": contact.stage.value,
        "tags": contact.tags[:VISIBLE_TAG_COUNT],
        "hidden_tag_count": max(len(contact.tags) - VISIBLE_TAG_COUNT, 0),
        "last_touch": last_touch_label(contact.last_interaction, now),
        "due_badge": (
            due_badge_label(due_task.due_date, now)
            if due_task else NO_OPEN_TASKS_LABEL
        ),
        "open_tasks": open_task_count(contact),
    }


def build_contact_detail(contact: Contact, now: datetime) -> dict:
    """Full profile: record plus sorted tasks and timeline with display stamps."""
    return {
        "contact": contact_to_snapshot(contact),
        "open_tasks": open_task_count(contact),
        "touchpoints": len(contact.interactions),
        "tasks": [
            {
                "id": t.id,
                "title": t.title,
                "due_date": t.due_date,
                "completed": t.completed,
                "due_label": stamp_label(t.due_date, now, timeline=False),
            }
            for t in sorted_tasks(contact)
        ],
        "timeline": [
            {
                "id": i.id,
                "type": i.type.value,
                "date": i.date,
                "date_label": stamp_label(i.date, now, timeline=True),
                "summary": i.summary,
                "next_steps": i.next_steps,
            }
            for i in sorted_interactions(contact)
        ],
    }


def build_upcoming_cards(
    contacts: list[Contact], now: datetime, limit: int = UPCOMING_TASK_LIMIT,
) -> list[dict]:
    """Upcoming task entries for the dashboard sidebar."""
    return [
        {
            "contact_id": contact.id,
            "contact_name": contact.name,
            "stage": contact.stage.value,
            "task_id": task.id,
            "title": task.title,
            "due_date": task.due_date,
            "due_label": due_distance_label(task.due_date, now),
        }
        for contact, task in upcoming_tasks(contacts, limit)
    ]
