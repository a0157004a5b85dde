"""Sample Contacts — the built-in state used when nothing has been saved yet.

Invariants:
    - Non-empty; ids unique across contacts, tasks and interactions
    - Each contact's last_interaction equals its newest interaction date
    - Dates are relative to `now` so the dashboard has live numbers on first run
"""

from datetime import datetime, timedelta

from relhub.core.crm_state import Contact, CrmState, Interaction, Task
from relhub.core.domain_types import InteractionType, Stage
from relhub.core.format_dates import to_iso


def build_sample_state(now: datetime) -> CrmState:
    """Fresh sample state anchored at `now`."""
    def at(days: float) -> str:
        return to_iso(now + timedelta(days=days))

    avery = Contact(
        id="sample-avery-chen",
        name="Avery Chen",
        company="Northwind Labs",
        job_title="Head of Partnerships",
        email="avery.chen@northwind.example",
        phone="+1 415 555 0142",
        location="San Francisco, CA",
        notes="Met at the SaaS founders dinner. Prefers short async updates.",
        tags=["partnership", "warm intro", "q3"],
        stage=Stage.ACTIVE,
        created_at=at(-40),
        last_interaction=at(-2),
        interactions=[
            Interaction(
                id="sample-avery-i1", date=at(-12), type=InteractionType.MEETING,
                summary="Intro call about co-marketing the integration launch.",
                next_steps="Share launch timeline draft",
            ),
            Interaction(
                id="sample-avery-i2", date=at(-2), type=InteractionType.EMAIL,
                summary="Sent the launch timeline; waiting on legal review.",
            ),
        ],
        tasks=[
            Task(id="sample-avery-t1", title="Follow up on legal review", due_date=at(3)),
            Task(
                id="sample-avery-t2", title="Send integration one-pager",
                due_date=at(-9), completed=True,
            ),
        ],
    )

    marcus = Contact(
        id="sample-marcus-reid",
        name="Marcus Reid",
        company="Brightline Capital",
        job_title="Principal",
        email="marcus@brightline.example",
        phone="+1 212 555 0199",
        location="New York, NY",
        notes="Interested in the seed extension. Ask about portfolio intros.",
        tags=["investor", "fundraising"],
        stage=Stage.LEAD,
        created_at=at(-20),
        last_interaction=at(-6),
        interactions=[
            Interaction(
                id="sample-marcus-i1", date=at(-6), type=InteractionType.CALL,
                summary="Walked through traction metrics; wants the data room.",
                next_steps="Grant data room access",
            ),
        ],
        tasks=[
            Task(id="sample-marcus-t1", title="Grant data room access", due_date=at(-1)),
        ],
    )

    priya = Contact(
        id="sample-priya-natarajan",
        name="Priya Natarajan",
        company="Helios Health",
        job_title="VP Operations",
        email="priya.n@helios.example",
        phone="+44 20 7946 0321",
        location="London, UK",
        notes="Renewal in two months. Champion for the analytics add-on.",
        tags=["customer", "renewal", "analytics", "enterprise"],
        stage=Stage.CUSTOMER,
        created_at=at(-180),
        last_interaction=at(-1),
        interactions=[
            Interaction(
                id="sample-priya-i1", date=at(-30), type=InteractionType.MEETING,
                summary="Quarterly business review; usage up 40%.",
            ),
            Interaction(
                id="sample-priya-i2", date=at(-1), type=InteractionType.NOTE,
                summary="Asked about SSO for the new regional team.",
                next_steps="Loop in solutions engineer",
            ),
        ],
        tasks=[
            Task(id="sample-priya-t1", title="Book renewal kickoff", due_date=at(14)),
            Task(id="sample-priya-t2", title="Intro solutions engineer", due_date=at(1)),
        ],
    )

    diego = Contact(
        id="sample-diego-alvarez",
        name="Diego Alvarez",
        company="Freelance",
        job_title="Product Designer",
        email="diego@alvarez.example",
        phone="",
        location="Lisbon, PT",
        notes="Between contracts until next month.",
        tags=["design", "referral"],
        stage=Stage.WAITING,
        created_at=at(-60),
        last_interaction=at(-25),
        interactions=[
            Interaction(
                id="sample-diego-i1", date=at(-25), type=InteractionType.EMAIL,
                summary="Checked availability for the onboarding redesign.",
            ),
        ],
        tasks=[],
    )

    return CrmState(contacts=[priya, avery, marcus, diego])
