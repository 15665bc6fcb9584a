"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never call them — the shell orchestrates the async
      calls around the pure logic (plan → transfer + persist → commit)
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from transcript_registry.core.domain_types import BlockHeight
from transcript_registry.core.records import FeeTransfer


class LedgerTransfer(Protocol):
    """Moves the issuance fee. Atomic: either the whole amount moves or nothing does.

    Raises LedgerTransferFailedError on any failure.
    """
    async def transfer(self, fee: FeeTransfer) -> None: ...


class HeightSource(Protocol):
    """Current ledger sequence height — the registry's notion of 'now'."""
    async def current_height(self) -> BlockHeight: ...


class RegistryRepository(Protocol):
    """Contract for registry persistence — implemented by shell.

    save_* calls raise on failure, and the caller then leaves memory untouched.
    save_issuance runs before_commit (the fee transfer) after its rows are
    accepted and before they are committed.
    """
    async def load_snapshot(self) -> dict | None: ...
    async def save_settings(self, settings: dict) -> None: ...
    async def save_issuance(
        self,
        settings: dict,
        transcript: dict,
        before_commit: Callable[[], Awaitable[None]],
    ) -> None: ...
    async def save_amendment(self, transcript: dict, update: dict) -> None: ...
    async def record_operation(
        self,
        operation: str,
        caller: str | None,
        input_data: dict,
        result: dict | None,
        error_code: str | None,
    ) -> None: ...
