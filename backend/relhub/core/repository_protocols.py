"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - State persistence is accessed only through StateGateway
    - load() returns None (never raises) when nothing is stored or the payload
      does not decode

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the pure functions that build
      the saved state are never async themselves
"""

from typing import Protocol

from relhub.core.crm_state import CrmState


class StateGateway(Protocol):
    """Contract for whole-state persistence under a fixed key — implemented by shell."""
    async def load(self) -> CrmState | None: ...
    async def save(self, state: CrmState) -> None: ...
