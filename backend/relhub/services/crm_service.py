"""CRM Service — load, apply a pure mutation, save; and compute views over the loaded state.

Invariants:
    - Every mutation is load -> pure core function -> save, in that order;
      nothing is saved when the core function raises
    - When nothing is stored, the seed state (or an empty state) is used and saved
    - Views are computed from the state the caller would see after the last save
    - toggle_task reports NotFoundError for unknown records; the core toggle
      itself stays a silent no-op
    - Every public method holds state_lock() from load through save: at most one
      read-modify-write runs per process at a time, and the seed is saved once

Design Decisions:
    - `clock` is injectable so tests can pin "now"
    - One lock per event loop (one per worker process); asyncio.Lock is not
      reentrant, so public methods call the unlocked _load / _require_contact
"""

import asyncio
import logging
import weakref
from datetime import datetime, tzinfo
from typing import Callable

from relhub.core.apply_mutations import (
    delete_contact, select_after_delete, toggle_task, upsert_contact,
    upsert_interaction, upsert_task,
)
from relhub.core.contact_forms import (
    ContactDraft, apply_contact_draft, build_interaction, build_task, create_contact,
)
from relhub.core.contact_views import (
    build_contact_detail, build_contact_row, build_upcoming_cards,
    filter_and_sort_contacts,
)
from relhub.core.crm_state import Contact, CrmState, Interaction, Task
from relhub.core.domain_types import (
    STAGE_FILTER_ALL, UPCOMING_TASK_LIMIT, ContactId, TaskId,
)
from relhub.core.errors import ErrorContext, NotFoundError
from relhub.core.overview_stats import compute_overview
from relhub.core.repository_protocols import StateGateway
from relhub.data.sample_contacts import build_sample_state

logger = logging.getLogger(__name__)

_state_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
    weakref.WeakKeyDictionary()
)


def state_lock() -> asyncio.Lock:
    """Lock serializing state access within the running event loop."""
    loop = asyncio.get_running_loop()
    lock = _state_locks.get(loop)
    if lock is None:
        lock = _state_locks[loop] = asyncio.Lock()
    return lock


class CrmService:
    """Orchestrates persistence around the pure CRM core."""

    def __init__(
        self,
        gateway: StateGateway,
        tz: tzinfo,
        seed_sample_contacts: bool = True,
        upcoming_limit: int = UPCOMING_TASK_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ):
        self.gateway = gateway
        self.tz = tz
        self.seed_sample_contacts = seed_sample_contacts
        self.upcoming_limit = upcoming_limit
        self._clock = clock

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return datetime.now(self.tz)

    # --- State (callers hold the lock) ----------------------------------------

    async def _load(self) -> CrmState:
        state = await self.gateway.load()
        if state is not None:
            return state
        state = (
            build_sample_state(self.now()) if self.seed_sample_contacts else CrmState()
        )
        logger.info(f"No stored state; starting with {len(state.contacts)} contact(s)")
        await self.gateway.save(state)
        return state

    async def _require_contact(self, contact_id: ContactId) -> tuple[CrmState, Contact]:
        state = await self._load()
        contact = state.find_contact(contact_id)
        if contact is None:
            raise NotFoundError("Contact", contact_id, ErrorContext(contact_id=contact_id))
        return state, contact

    async def load_state(self) -> CrmState:
        """Stored state, or the initial state (saved so it is stable across requests)."""
        async with state_lock():
            return await self._load()

    # --- Views -----------------------------------------------------------------

    async def list_contacts(
        self, search: str = "", stage: str = STAGE_FILTER_ALL,
    ) -> dict:
        state = await self.load_state()
        now = self.now()
        matches = filter_and_sort_contacts(state.contacts, search, stage)
        return {
            "contacts": [build_contact_row(c, now) for c in matches],
            "match_count": len(matches),
            "total_count": len(state.contacts),
        }

    async def contact_detail(self, contact_id: ContactId) -> dict:
        async with state_lock():
            _, contact = await self._require_contact(contact_id)
        return build_contact_detail(contact, self.now())

    async def dashboard(self) -> dict:
        state = await self.load_state()
        now = self.now()
        return {
            "overview": compute_overview(state.contacts, now),
            "upcoming_tasks": build_upcoming_cards(
                state.contacts, now, self.upcoming_limit,
            ),
        }

    # --- Mutations -------------------------------------------------------------

    async def create_contact(self, draft: ContactDraft) -> Contact:
        contact = create_contact(draft, self.now())
        async with state_lock():
            state, contact_id = upsert_contact(await self._load(), contact)
            await self.gateway.save(state)
        logger.info("Contact created", extra={"contact_id": contact_id})
        return state.find_contact(contact_id)

    async def update_contact(self, contact_id: ContactId, draft: ContactDraft) -> Contact:
        async with state_lock():
            state, existing = await self._require_contact(contact_id)
            state, _ = upsert_contact(state, apply_contact_draft(existing, draft))
            await self.gateway.save(state)
        logger.info("Contact updated", extra={"contact_id": contact_id})
        return state.find_contact(contact_id)

    async def delete_contact(
        self, contact_id: ContactId, selected_id: ContactId | None = None,
    ) -> ContactId | None:
        """Delete (idempotent). Returns the selection pointer afterwards."""
        async with state_lock():
            state = delete_contact(await self._load(), contact_id)
            await self.gateway.save(state)
        logger.info("Contact deleted", extra={"contact_id": contact_id})
        return select_after_delete(state, contact_id, selected_id)

    async def add_task(
        self, contact_id: ContactId, title: str, due_date: str | datetime,
    ) -> Task:
        task = build_task(title, due_date, self.tz)
        async with state_lock():
            state = upsert_task(await self._load(), contact_id, task)
            await self.gateway.save(state)
        logger.info(
            "Task added", extra={"contact_id": contact_id, "task_id": task.id},
        )
        return task

    async def toggle_task(self, contact_id: ContactId, task_id: TaskId) -> Task:
        async with state_lock():
            state, contact = await self._require_contact(contact_id)
            if contact.find_task(task_id) is None:
                raise NotFoundError(
                    "Task", task_id,
                    ErrorContext(contact_id=contact_id, task_id=task_id),
                )
            state = toggle_task(state, contact_id, task_id)
            await self.gateway.save(state)
        task = state.find_contact(contact_id).find_task(task_id)
        logger.info(
            f"Task marked {'done' if task.completed else 'open'}",
            extra={"contact_id": contact_id, "task_id": task_id},
        )
        return task

    async def log_interaction(
        self,
        contact_id: ContactId,
        kind: str,
        date: str | datetime | None,
        summary: str,
        next_steps: str | None = None,
    ) -> Interaction:
        interaction = build_interaction(kind, date, summary, next_steps, self.now())
        async with state_lock():
            state = upsert_interaction(await self._load(), contact_id, interaction)
            await self.gateway.save(state)
        logger.info(
            "Interaction logged",
            extra={"contact_id": contact_id, "interaction_id": interaction.id},
        )
        return interaction
