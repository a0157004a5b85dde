"""Domain Types — identifiers and enums shared across the CRM core.

Invariants:
    - ContactId, TaskId, InteractionId are opaque strings (uuid4 text for new records)
    - Stage and InteractionType values are the exact words stored on disk
    - STAGE_FILTER_ALL is a filter sentinel, never a Stage

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ContactId = NewType("ContactId", str)
TaskId = NewType("TaskId", str)
InteractionId = NewType("InteractionId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Stage(str, Enum):
    """Pipeline status of a relationship."""
    LEAD = "Lead"
    ACTIVE = "Active"
    WAITING = "Waiting"
    CUSTOMER = "Customer"


class InteractionType(str, Enum):
    """Kind of logged touchpoint."""
    CALL = "Call"
    EMAIL = "Email"
    MEETING = "Meeting"
    NOTE = "Note"


# ─── Constants ───────────────────────────────────────────────────

STAGE_FILTER_ALL = "All"
STAGE_FILTER_OPTIONS: tuple[str, ...] = (
    STAGE_FILTER_ALL, *(s.value for s in Stage),
)

UPCOMING_TASK_LIMIT = 6
FOLLOW_UP_WINDOW_DAYS = 7
TOUCH_WINDOW_DAYS = 7
VISIBLE_TAG_COUNT = 3
