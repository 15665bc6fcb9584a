"""Registry Service — orchestrates core operations around ledger and persistence IO.

Invariants:
    - One asyncio.Lock serializes every mutating call: whole-call atomicity, single writer
    - Every check runs before any IO: 'now' is read only after the pure plan passes,
      so check precedence never depends on the ledger being reachable
    - Issuance follows plan (pure) → now → persist + fee transfer (IO) → commit (pure);
      update follows plan (pure) → now → persist (IO) → commit (pure)
    - Persistence precedes the in-memory commit: a failed write fails the call and
      leaves memory untouched, so an id is never handed out unless it is stored
    - Settings calls stage a copy of config/access and swap it in after the write
    - The operation log is best effort: logged on failure, never fails a call
    - Reads take no lock: commits contain no await, so readers never see half a call

Design Decisions:
    - Service owns the state reference; routes never touch RegistryState directly
    - Repository optional: None → purely in-memory registry (tests, local runs)
    - Module-level registry_service singleton initialized in lifespan, like db_manager
"""

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable, Sequence

from transcript_registry.core import access_control, admin_config, transcript_store
from transcript_registry.core.domain_types import (
    DEFAULT_ISSUANCE_FEE, DEFAULT_MAX_TRANSCRIPTS,
    Identity, Operation, TranscriptId,
)
from transcript_registry.core.errors import RegistryError
from transcript_registry.core.records import (
    FeeTransfer, IssuanceRequest, Transcript, TranscriptUpdate,
)
from transcript_registry.core.registry_snapshot import (
    registry_from_snapshot, settings_to_snapshot, transcript_to_dict, update_to_dict,
)
from transcript_registry.core.registry_state import (
    AccessList, AdminConfig, RegistryState,
)
from transcript_registry.core.repository_protocols import (
    HeightSource, LedgerTransfer, RegistryRepository,
)
from transcript_registry.core.student_index import list_for_student

logger = logging.getLogger(__name__)


class RegistryService:
    """Single-writer facade over the registry core."""

    def __init__(
        self,
        state: RegistryState,
        ledger: LedgerTransfer,
        heights: HeightSource,
        repository: RegistryRepository | None = None,
    ):
        self.state = state
        self._ledger = ledger
        self._heights = heights
        self._repository = repository
        self._lock = asyncio.Lock()

    # --- Configuration --------------------------------------------------------

    async def set_fee_recipient(self, recipient: Identity, caller: Identity) -> None:
        async def action() -> dict:
            staged = self._stage_settings()
            admin_config.set_fee_recipient(staged, recipient, caller)
            await self._apply_settings(staged)
            return {"fee_recipient": recipient}

        await self._execute(
            Operation.SET_FEE_RECIPIENT, caller, {"recipient": recipient}, action,
        )

    async def set_issuance_fee(self, fee: int, caller: Identity) -> None:
        async def action() -> dict:
            staged = self._stage_settings()
            admin_config.set_issuance_fee(staged, fee, caller)
            await self._apply_settings(staged)
            return {"issuance_fee": fee}

        await self._execute(Operation.SET_ISSUANCE_FEE, caller, {"fee": fee}, action)

    async def set_max_transcripts(self, new_max: int, caller: Identity) -> None:
        async def action() -> dict:
            staged = self._stage_settings()
            admin_config.set_max_transcripts(staged, new_max, caller)
            await self._apply_settings(staged)
            return {"max_transcripts": new_max}

        await self._execute(
            Operation.SET_MAX_TRANSCRIPTS, caller,
            {"max_transcripts": new_max}, action,
        )

    async def add_issuer(self, issuer: Identity, caller: Identity) -> None:
        async def action() -> dict:
            staged = self._stage_settings()
            access_control.add_issuer(staged, issuer, caller)
            await self._apply_settings(staged)
            return {"issuer": issuer}

        await self._execute(Operation.ADD_ISSUER, caller, {"issuer": issuer}, action)

    async def remove_issuer(self, issuer: Identity, caller: Identity) -> None:
        async def action() -> dict:
            staged = self._stage_settings()
            access_control.remove_issuer(staged, issuer, caller)
            await self._apply_settings(staged)
            return {"issuer": issuer}

        await self._execute(
            Operation.REMOVE_ISSUER, caller, {"issuer": issuer}, action,
        )

    # --- Transcripts ----------------------------------------------------------

    async def issue(self, request: IssuanceRequest, issuer: Identity) -> TranscriptId:
        """Validate, store with the fee transfer, then commit. Returns the new transcript id."""
        async def action() -> dict:
            # ── PURE: every check, no mutation ──
            plan = transcript_store.plan_issuance(self.state, request, issuer)
            # ── IMPURE: read 'now'; store + move the fee, or the call aborts here ──
            now = await self._heights.current_height()
            transcript = transcript_store.build_transcript(plan, request, issuer, now)
            await self._save_issuance(transcript, plan.fee)
            # ── PURE: commit cannot fail ──
            transcript_id = transcript_store.commit_issuance(self.state, transcript)
            return {
                "transcript_id": transcript_id,
                "fee": plan.fee.amount,
                "fee_recipient": plan.fee.recipient,
                "timestamp": now,
            }

        result = await self._execute(
            Operation.ISSUE_TRANSCRIPT, issuer, _issuance_input(request), action,
        )
        return TranscriptId(result["transcript_id"])

    async def update(
        self,
        transcript_id: int,
        gpa: int,
        courses: Sequence[str],
        updater: Identity,
    ) -> TranscriptUpdate:
        async def action() -> dict:
            plan = transcript_store.plan_update(
                self.state, TranscriptId(transcript_id), gpa, courses, updater,
            )
            now = await self._heights.current_height()
            amended, record = transcript_store.build_amendment(plan, now)
            if self._repository is not None:
                await self._repository.save_amendment(
                    transcript_to_dict(amended), update_to_dict(record),
                )
            transcript_store.commit_amendment(self.state, amended, record)
            return {
                "transcript_id": transcript_id,
                "gpa": record.gpa,
                "courses": list(record.courses),
                "timestamp": record.timestamp,
            }

        await self._execute(
            Operation.UPDATE_TRANSCRIPT, updater,
            {"transcript_id": transcript_id, "gpa": gpa, "courses": list(courses)},
            action,
        )
        return self.state.transcript_updates[TranscriptId(transcript_id)]

    # --- Reads ----------------------------------------------------------------

    def get(self, transcript_id: int) -> Transcript | None:
        return transcript_store.get_transcript(self.state, transcript_id)

    def get_update(self, transcript_id: int) -> TranscriptUpdate | None:
        return transcript_store.get_transcript_update(self.state, transcript_id)

    def count(self) -> int:
        return transcript_store.transcript_count(self.state)

    def verify_hash(self, transcript_id: int, candidate: bytes) -> bool:
        return transcript_store.verify_hash(self.state, transcript_id, candidate)

    def list_for_student(self, student: Identity) -> list[TranscriptId]:
        return list_for_student(self.state, student)

    def config_view(self) -> dict:
        config = self.state.config
        return {
            "fee_recipient": config.fee_recipient,
            "issuance_fee": config.issuance_fee,
            "max_transcripts": config.max_transcripts,
            "transcript_count": config.next_transcript_id,
            "administrator": self.state.access.administrator,
            "issuers": sorted(self.state.access.issuers),
        }

    # --- Internals ------------------------------------------------------------

    def _stage_settings(self) -> RegistryState:
        """State whose config/access are private copies; transcript maps are shared."""
        return dataclasses.replace(
            self.state,
            config=dataclasses.replace(self.state.config),
            access=AccessList(
                administrator=self.state.access.administrator,
                issuers=set(self.state.access.issuers),
            ),
        )

    async def _apply_settings(self, staged: RegistryState) -> None:
        if self._repository is not None:
            await self._repository.save_settings(
                settings_to_snapshot(staged.config, staged.access),
            )
        self.state.config = staged.config
        self.state.access = staged.access

    async def _save_issuance(self, transcript: Transcript, fee: FeeTransfer) -> None:
        if self._repository is None:
            await self._ledger.transfer(fee)
            return
        advanced = dataclasses.replace(
            self.state.config, next_transcript_id=transcript.id + 1,
        )
        await self._repository.save_issuance(
            settings_to_snapshot(advanced, self.state.access),
            transcript_to_dict(transcript),
            before_commit=lambda: self._ledger.transfer(fee),
        )

    async def _execute(
        self,
        operation: Operation,
        caller: Identity,
        input_data: dict,
        action: Callable[[], Awaitable[dict]],
    ) -> dict:
        """Run one mutating call under the writer lock and record its outcome."""
        async with self._lock:
            try:
                result = await action()
            except RegistryError as e:
                log = logger.error if e.http_status >= 500 else logger.warning
                log(
                    f"{operation.value} rejected: {e.message}",
                    extra={
                        "operation": operation.value,
                        "caller": caller,
                        "error_code": e.code,
                    },
                )
                await self._record(operation, caller, input_data, None, e.code)
                raise
            logger.info(
                f"{operation.value} succeeded",
                extra={
                    "operation": operation.value,
                    "caller": caller,
                    "transcript_id": result.get("transcript_id"),
                },
            )
            await self._record(operation, caller, input_data, result, None)
            return result

    async def _record(
        self,
        operation: Operation,
        caller: Identity,
        input_data: dict,
        result: dict | None,
        error_code: str | None,
    ) -> None:
        """Append to the operation log. Never crashes."""
        if self._repository is None:
            return
        try:
            await self._repository.record_operation(
                operation.value, caller, input_data, result, error_code,
            )
        except Exception as e:
            logger.error(
                f"Failed to record {operation.value}: {e}",
                extra={"operation": operation.value, "caller": caller},
            )


def _issuance_input(request: IssuanceRequest) -> dict:
    """JSON-safe copy of an issuance request for the operation log."""
    return {
        "student": request.student,
        "content_hash": bytes(request.content_hash).hex(),
        "gpa": request.gpa,
        "courses": list(request.courses),
        "degree": request.degree,
        "major": request.major,
        "institution": request.institution,
        "graduation_date": request.graduation_date,
        "credits": request.credits,
        "location": request.location,
    }


def seed_registry_state(
    snapshot: dict | None,
    administrator: str | None = None,
    issuers: Sequence[str] = (),
    fee_recipient: str | None = None,
    issuance_fee: int = DEFAULT_ISSUANCE_FEE,
    max_transcripts: int = DEFAULT_MAX_TRANSCRIPTS,
) -> RegistryState:
    """Restore from snapshot if one exists; otherwise build a fresh state from settings."""
    if snapshot:
        return registry_from_snapshot(snapshot)
    return RegistryState(
        config=AdminConfig(
            fee_recipient=Identity(fee_recipient) if fee_recipient else None,
            issuance_fee=issuance_fee,
            max_transcripts=max_transcripts,
        ),
        access=AccessList(
            administrator=Identity(administrator) if administrator else None,
            issuers={Identity(i) for i in issuers},
        ),
    )


# Singleton (initialized on startup)
registry_service: RegistryService | None = None


def init_registry(service: RegistryService) -> RegistryService:
    global registry_service
    registry_service = service
    return registry_service
