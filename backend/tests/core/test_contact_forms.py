"""Contact Forms — tests for building validated records from form input."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from relhub.core.contact_forms import (
    ContactDraft,
    apply_contact_draft,
    build_interaction,
    build_task,
    create_contact,
    split_tags,
)
from relhub.core.domain_types import InteractionType, Stage
from relhub.core.errors import ValidationError
from tests.factories import NOW, make_contact, make_interaction, make_task


# ─── Contacts ───────────────────────────────────────────────────

def test_split_tags_strips_and_drops_empties():
    assert split_tags("vip, founder,, ,vip ") == ["vip", "founder", "vip"]
    assert split_tags("") == []


def test_create_contact_stamps_now():
    contact = create_contact(
        ContactDraft(name="Jane Doe", company="Acme", tags="vip, founder"), NOW,
    )
    assert contact.name == "Jane Doe"
    assert contact.tags == ["vip", "founder"]
    assert contact.stage == Stage.LEAD
    assert contact.created_at == "2024-03-15T12:00:00.000Z"
    assert contact.last_interaction == contact.created_at
    assert contact.tasks == [] and contact.interactions == []
    assert contact.id


def test_create_contact_ids_are_unique():
    draft = ContactDraft(name="Jane")
    assert create_contact(draft, NOW).id != create_contact(draft, NOW).id


def test_new_record_ids_are_plain_uuid_strings():
    ids = [
        create_contact(ContactDraft(name="Jane"), NOW).id,
        build_task("Call", "2024-03-18T09:00:00Z", timezone.utc).id,
        build_interaction("Call", None, "Chat", None, NOW).id,
    ]
    for record_id in ids:
        assert type(record_id) is str
        assert str(uuid.UUID(record_id)) == record_id


def test_create_contact_requires_name():
    with pytest.raises(ValidationError) as exc:
        create_contact(ContactDraft(name="  "), NOW)
    assert exc.value.field == "name"


def test_create_contact_rejects_unknown_stage():
    with pytest.raises(ValidationError) as exc:
        create_contact(ContactDraft(name="Jane", stage="Bogus"), NOW)
    assert exc.value.field == "stage"


def test_apply_contact_draft_keeps_identity_and_history():
    original = make_contact(
        "c1", "Jane", tasks=[make_task("t1")], interactions=[make_interaction("i1")],
    )
    edited = apply_contact_draft(
        original, ContactDraft(name="Jane Q", stage="Customer", tags="a,b"),
    )
    assert edited.id == "c1"
    assert edited.created_at == original.created_at
    assert edited.last_interaction == original.last_interaction
    assert [t.id for t in edited.tasks] == ["t1"]
    assert [i.id for i in edited.interactions] == ["i1"]
    assert edited.name == "Jane Q"
    assert edited.stage == Stage.CUSTOMER
    assert edited.tags == ["a", "b"]
    assert original.name == "Jane"


# ─── Tasks ──────────────────────────────────────────────────────

def test_build_task_normalizes_due_date():
    task = build_task("Call back", "2024-03-18T09:00:00Z")
    assert task.due_date == "2024-03-18T09:00:00.000Z"
    assert task.completed is False
    assert task.title == "Call back"


def test_build_task_localizes_naive_due_date():
    eastern = timezone(timedelta(hours=-4))
    task = build_task("Call back", datetime(2024, 3, 18, 9, 0), eastern)
    assert task.due_date == "2024-03-18T13:00:00.000Z"


def test_build_task_requires_title():
    with pytest.raises(ValidationError) as exc:
        build_task("", "2024-03-18T09:00:00Z")
    assert exc.value.field == "title"


@pytest.mark.parametrize("due", [None, "", "next week"])
def test_build_task_requires_parseable_due_date(due):
    with pytest.raises(ValidationError) as exc:
        build_task("Call back", due)
    assert exc.value.field == "due_date"


# ─── Interactions ───────────────────────────────────────────────

def test_build_interaction_defaults_date_to_now():
    interaction = build_interaction("Email", None, "Sent deck", "  ", NOW)
    assert interaction.date == "2024-03-15T12:00:00.000Z"
    assert interaction.type == InteractionType.EMAIL
    assert interaction.next_steps is None


def test_build_interaction_keeps_next_steps():
    interaction = build_interaction(
        InteractionType.MEETING, "2024-03-14T09:30:00Z", "Lunch", "Send notes", NOW,
    )
    assert interaction.date == "2024-03-14T09:30:00.000Z"
    assert interaction.next_steps == "Send notes"


def test_build_interaction_requires_summary():
    with pytest.raises(ValidationError) as exc:
        build_interaction("Call", None, " ", None, NOW)
    assert exc.value.field == "summary"


def test_build_interaction_rejects_unknown_type():
    with pytest.raises(ValidationError) as exc:
        build_interaction("Fax", None, "Sent", None, NOW)
    assert exc.value.field == "type"


def test_build_interaction_rejects_bad_date():
    with pytest.raises(ValidationError) as exc:
        build_interaction("Call", "whenever", "Chat", None, NOW)
    assert exc.value.field == "date"
