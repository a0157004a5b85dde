"""CRM State Snapshot — tests for the storage schema encoder and decoder.

Tests cover:
    - camelCase keys, nextSteps omitted when absent
    - Decode of a fully populated state reproduces it
    - Missing optional text fields default to ""
    - Structural problems raise SnapshotError; malformed dates do not
"""

import pytest

from relhub.core.crm_state_snapshot import (
    contact_from_snapshot,
    contact_to_snapshot,
    state_from_snapshot,
    state_to_snapshot,
)
from relhub.core.domain_types import InteractionType, Stage
from relhub.core.errors import SnapshotError
from tests.factories import make_contact, make_interaction, make_state, make_task


def _populated_state():
    return make_state(
        make_contact(
            "c1", "Jane", Stage.CUSTOMER, "2024-03-14T09:30:00.000Z",
            company="Acme", job_title="CTO", email="jane@acme.test",
            phone="555", location="Lisbon", notes="Likes tea", tags=["vip", "vip"],
            tasks=[make_task("t1", "2024-03-18T09:00:00.000Z", completed=True)],
            interactions=[
                make_interaction("i1", "2024-03-14T09:30:00.000Z", next_steps="Send deck"),
                make_interaction("i2", "2024-03-01T09:30:00.000Z", InteractionType.NOTE),
            ],
        ),
        make_contact("c2", "Tom"),
    )


def test_contact_snapshot_uses_camel_case_keys():
    data = contact_to_snapshot(_populated_state().contacts[0])
    assert data["jobTitle"] == "CTO"
    assert data["createdAt"] == "2024-01-01T00:00:00.000Z"
    assert data["lastInteraction"] == "2024-03-14T09:30:00.000Z"
    assert data["stage"] == "Customer"
    assert data["tasks"][0] == {
        "id": "t1", "title": "Follow up",
        "dueDate": "2024-03-18T09:00:00.000Z", "completed": True,
    }
    assert data["interactions"][0]["nextSteps"] == "Send deck"
    assert "nextSteps" not in data["interactions"][1]


def test_decode_reproduces_encoded_state():
    state = _populated_state()
    assert state_from_snapshot(state_to_snapshot(state)) == state


def test_missing_text_fields_default_to_empty():
    contact = contact_from_snapshot({
        "id": "c1", "name": "Jane", "stage": "Lead",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "lastInteraction": "2024-01-01T00:00:00.000Z",
    })
    assert contact.company == ""
    assert contact.job_title == ""
    assert contact.notes == ""
    assert contact.tags == []
    assert contact.tasks == []


def test_malformed_dates_are_kept_verbatim():
    snapshot = state_to_snapshot(make_state(
        make_contact("c1", last_interaction="garbage", tasks=[make_task("t1", "soon")]),
    ))
    state = state_from_snapshot(snapshot)
    assert state.contacts[0].last_interaction == "garbage"
    assert state.contacts[0].tasks[0].due_date == "soon"


@pytest.mark.parametrize("payload", [
    [],
    {"contacts": None},
    {"contacts": ["not an object"]},
    {"contacts": [{"name": "No id"}]},
    {"contacts": [{"id": "c1", "stage": "Prospect"}]},
    {"contacts": [{"id": "c1"}, {"id": "c1"}]},
    {"contacts": [{"id": "c1", "tasks": [{"id": "t1"}, {"id": "t1"}]}]},
    {"contacts": [{"id": "c1", "tasks": [{"id": "t1", "completed": "false"}]}]},
    {"contacts": [{"id": "c1", "tasks": [{"id": "t1", "completed": 1}]}]},
    {"contacts": [{"id": "c1", "interactions": [{"id": "i1", "type": "Fax"}]}]},
])
def test_structural_problems_raise(payload):
    with pytest.raises(SnapshotError) as exc:
        state_from_snapshot(payload)
    assert exc.value.code == "SNAPSHOT_DECODE_ERROR"


def test_empty_contacts_is_valid():
    assert state_from_snapshot({"contacts": []}).contacts == []


def test_missing_completed_flag_defaults_to_open():
    state = state_from_snapshot({"contacts": [{"id": "c1", "tasks": [{"id": "t1"}]}]})
    assert state.contacts[0].tasks[0].completed is False
