"""CRM State Snapshot ORM — one row per state key holding the serialized CrmState.

Invariants:
    - key is the primary key; save() overwrites the row for its key
    - payload is JSON text in the storage schema ({"contacts": [...]})

Design Decisions:
    - Text column, not JSON: the gateway decodes it and treats undecodable
      payloads as "no prior state"
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from relhub.db.base import Base


class CrmStateSnapshot(Base):
    """Persisted whole-state value under a fixed key."""
    __tablename__ = "crm_state_snapshots"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
