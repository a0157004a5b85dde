"""SQL State Gateway — StateGateway backed by one row in crm_state_snapshots.

Invariants:
    - load() returns None when the row is missing or its payload does not decode;
      decode failures are logged at WARNING and never raised
    - load() ends its read transaction, so the connection is back in the pool
      before the caller releases the state lock
    - save() is a single INSERT ... ON CONFLICT DO UPDATE on the key, then commit;
      two first saves for the same key never collide
    - Payload is the storage schema produced by state_to_snapshot
"""

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from relhub.core.crm_state import CrmState
from relhub.core.crm_state_snapshot import state_from_snapshot, state_to_snapshot
from relhub.core.errors import SnapshotError
from relhub.models.crm_state_snapshot import CrmStateSnapshot

logger = logging.getLogger(__name__)

_UPSERTS = {"postgresql": postgresql_insert, "sqlite": sqlite_insert}


class SqlStateGateway:
    """Whole-state persistence keyed by a fixed identifier."""

    def __init__(self, db: AsyncSession, key: str):
        self.db = db
        self.key = key

    async def load(self) -> CrmState | None:
        payload = await self.db.scalar(
            select(CrmStateSnapshot.payload).where(CrmStateSnapshot.key == self.key),
        )
        await self.db.commit()
        if payload is None:
            return None
        try:
            return state_from_snapshot(json.loads(payload))
        except (json.JSONDecodeError, SnapshotError) as e:
            logger.warning(
                f"Discarding undecodable state payload: {e}",
                extra={"state_key": self.key},
            )
            return None

    async def save(self, state: CrmState) -> None:
        insert = _UPSERTS[self.db.get_bind().dialect.name]
        stmt = insert(CrmStateSnapshot).values(
            key=self.key,
            payload=json.dumps(state_to_snapshot(state), ensure_ascii=False),
            updated_at=datetime.now(timezone.utc),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CrmStateSnapshot.key],
            set_={
                "payload": stmt.excluded.payload,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.db.execute(stmt)
        await self.db.commit()
