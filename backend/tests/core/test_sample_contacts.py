"""Sample Contacts — tests for the built-in starting state."""

from relhub.core.contact_views import build_upcoming_cards
from relhub.core.crm_state_snapshot import state_from_snapshot, state_to_snapshot
from relhub.core.overview_stats import compute_overview
from relhub.data.sample_contacts import build_sample_state
from tests.factories import NOW


def test_sample_state_is_valid_and_unique():
    state = build_sample_state(NOW)
    assert state.contacts
    assert len(set(state.contact_ids)) == len(state.contact_ids)
    for contact in state.contacts:
        assert len({t.id for t in contact.tasks}) == len(contact.tasks)
        assert len({i.id for i in contact.interactions}) == len(contact.interactions)
    assert state_from_snapshot(state_to_snapshot(state)) == state


def test_last_interaction_matches_newest_interaction():
    for contact in build_sample_state(NOW).contacts:
        assert contact.last_interaction == max(i.date for i in contact.interactions)


def test_sample_dashboard_numbers():
    state = build_sample_state(NOW)
    overview = compute_overview(state.contacts, NOW)
    assert overview["contact_count"] == 4
    assert overview["active_count"] == 3
    assert overview["overdue_task_count"] == 1
    assert overview["touches_last_7_days"] == 3
    assert overview["upcoming_follow_up_count"] == 2

    cards = build_upcoming_cards(state.contacts, NOW)
    assert [c["task_id"] for c in cards] == [
        "sample-marcus-t1", "sample-priya-t2", "sample-avery-t1", "sample-priya-t1",
    ]
