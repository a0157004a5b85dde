"""Overview Stats — tests for dashboard metric computation.

Tests cover:
    - Overdue cutoff at start of today (day granularity), in now's timezone
    - Upcoming follow-ups count contacts, within a 7 calendar-day window
    - Touches in the last 7 days (past or future, calendar days)
    - Active count excludes Waiting; stage_counts sums to contact_count
    - Order independence and tolerance of malformed dates
"""

from datetime import datetime, timedelta, timezone

from relhub.core.domain_types import Stage
from relhub.core.overview_stats import (
    compute_overview,
    is_overdue,
    is_recent_touch,
    is_upcoming_follow_up,
)
from tests.factories import NOW, iso, make_contact, make_interaction, make_task


# ─── Overdue ────────────────────────────────────────────────────

def test_task_due_yesterday_is_overdue():
    contact = make_contact(tasks=[make_task("t1", iso(days=-1))])
    assert compute_overview([contact], NOW)["overdue_task_count"] == 1


def test_task_due_earlier_today_is_not_overdue():
    task = make_task("t1", iso(hours=-2))
    assert not is_overdue(task, NOW)
    assert is_upcoming_follow_up(task, NOW)


def test_completed_task_is_never_overdue():
    assert not is_overdue(make_task("t1", iso(days=-3), completed=True), NOW)


def test_overdue_counts_every_task():
    contact = make_contact(tasks=[
        make_task("t1", iso(days=-1)),
        make_task("t2", iso(days=-10)),
        make_task("t3", iso(days=2)),
    ])
    assert compute_overview([contact], NOW)["overdue_task_count"] == 2


def test_overdue_cutoff_uses_now_timezone():
    eastern = timezone(timedelta(hours=-4))
    local_now = datetime(2024, 3, 15, 1, 0, tzinfo=eastern)
    task = make_task("t1", "2024-03-15T03:00:00.000Z")
    # 03:00Z is 23:00 the previous evening in UTC-4
    assert is_overdue(task, local_now)
    assert not is_overdue(task, datetime(2024, 3, 15, 1, 0, tzinfo=timezone.utc))


# ─── Upcoming follow-ups ────────────────────────────────────────

def test_two_tasks_on_one_contact_count_once():
    contact = make_contact(tasks=[
        make_task("t1", iso(days=3)),
        make_task("t2", iso(days=4)),
    ])
    assert compute_overview([contact], NOW)["upcoming_follow_up_count"] == 1


def test_follow_up_window_is_seven_calendar_days():
    assert is_upcoming_follow_up(make_task("t1", iso(days=7)), NOW)
    assert not is_upcoming_follow_up(make_task("t1", iso(days=8)), NOW)


def test_overdue_and_completed_tasks_are_not_upcoming():
    assert not is_upcoming_follow_up(make_task("t1", iso(days=-1)), NOW)
    assert not is_upcoming_follow_up(make_task("t1", iso(days=2), completed=True), NOW)


def test_upcoming_follow_up_counts_each_contact():
    contacts = [
        make_contact("a", tasks=[make_task("t1", iso(days=1))]),
        make_contact("b", tasks=[make_task("t1", iso(days=6))]),
        make_contact("c", tasks=[make_task("t1", iso(days=12))]),
    ]
    assert compute_overview(contacts, NOW)["upcoming_follow_up_count"] == 2


# ─── Touches ────────────────────────────────────────────────────

def test_recent_touch_window():
    assert is_recent_touch(iso(days=-7), NOW)
    assert not is_recent_touch(iso(days=-8), NOW)
    assert is_recent_touch(iso(days=3), NOW)
    assert not is_recent_touch("", NOW)


def test_touches_count_interactions_not_contacts():
    contact = make_contact(interactions=[
        make_interaction("i1", iso(days=-1)),
        make_interaction("i2", iso(days=-2)),
        make_interaction("i3", iso(days=-30)),
    ])
    assert compute_overview([contact], NOW)["touches_last_7_days"] == 2


# ─── Counts ─────────────────────────────────────────────────────

def test_active_count_excludes_waiting():
    contacts = [
        make_contact("a", stage=Stage.LEAD),
        make_contact("b", stage=Stage.WAITING),
        make_contact("c", stage=Stage.CUSTOMER),
        make_contact("d", stage=Stage.ACTIVE),
    ]
    overview = compute_overview(contacts, NOW)
    assert overview["contact_count"] == 4
    assert overview["active_count"] == 3


def test_stage_counts_sum_to_contact_count():
    contacts = [
        make_contact("a", stage=Stage.LEAD),
        make_contact("b", stage=Stage.LEAD),
        make_contact("c", stage=Stage.CUSTOMER),
    ]
    overview = compute_overview(contacts, NOW)
    assert overview["stage_counts"] == {"Lead": 2, "Customer": 1}
    assert sum(overview["stage_counts"].values()) == overview["contact_count"]
    assert "All" not in overview["stage_counts"]


def test_empty_contacts():
    overview = compute_overview([], NOW)
    assert overview == {
        "contact_count": 0,
        "active_count": 0,
        "overdue_task_count": 0,
        "touches_last_7_days": 0,
        "upcoming_follow_up_count": 0,
        "stage_counts": {},
    }


def test_order_independent():
    contacts = [
        make_contact("a", stage=Stage.ACTIVE, tasks=[make_task("t1", iso(days=-2))]),
        make_contact("b", stage=Stage.WAITING, interactions=[make_interaction("i1")]),
        make_contact("c", tasks=[make_task("t1", iso(days=2))]),
    ]
    assert compute_overview(contacts, NOW) == compute_overview(contacts[::-1], NOW)


def test_malformed_dates_do_not_count():
    contact = make_contact(
        tasks=[make_task("t1", "not-a-date")],
        interactions=[make_interaction("i1", "also-not-a-date")],
    )
    overview = compute_overview([contact], NOW)
    assert overview["overdue_task_count"] == 0
    assert overview["upcoming_follow_up_count"] == 0
    assert overview["touches_last_7_days"] == 0
