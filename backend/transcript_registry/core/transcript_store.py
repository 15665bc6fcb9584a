"""Transcript Store — issuance, amendment, and lookup over RegistryState.

Invariants:
    - Issuance precedence: capacity → student → issuer → fields → fee recipient
    - plan_* functions are PURE: every check runs there, nothing is mutated
    - build_* functions are PURE: they produce the records the shell persists
    - commit_* functions cannot fail: every check already passed in plan_*
    - The shell reads 'now', moves the fee and persists BETWEEN plan and commit;
      any failure there means commit never runs, so no id is consumed
    - An amendment replaces the Transcript and its TranscriptUpdate together, or neither
    - get_* lookups never raise; absence is None

Design Decisions:
    - Plan/build/commit split instead of IO callbacks: ledger and database are async IO,
      the core stays sync and pure (ADR: impureim sandwich)
    - Records are frozen; dataclasses.replace builds the amended copy before any assignment
"""

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass

from transcript_registry.core.access_control import (
    check_issuer_authorized, check_update_ownership,
)
from transcript_registry.core.admin_config import (
    check_capacity, check_recipient_configured,
)
from transcript_registry.core.domain_types import (
    BlockHeight, FailureKind, Identity, TranscriptId,
)
from transcript_registry.core.enforce_transcript import (
    check_student, validate_issuance_fields, validate_update_fields,
)
from transcript_registry.core.errors import ErrorContext, error_from_violation
from transcript_registry.core.records import (
    FeeTransfer, IssuanceRequest, Transcript, TranscriptUpdate,
)
from transcript_registry.core.registry_state import RegistryState
from transcript_registry.core.student_index import append_to_index
from transcript_registry.core.violations import violation


@dataclass(frozen=True)
class IssuancePlan:
    """Validated issuance awaiting its fee transfer."""
    transcript_id: TranscriptId
    fee: FeeTransfer


# --- Issuance -----------------------------------------------------------------

def plan_issuance(
    state: RegistryState, request: IssuanceRequest, issuer: Identity,
) -> IssuancePlan:
    """Run every issuance check in order. Raises the first failure. Pure."""
    error = (
        check_capacity(state.config)
        or check_student(request.student)
        or check_issuer_authorized(state.access, issuer)
        or validate_issuance_fields(request)
        or check_recipient_configured(state.config)
    )
    if error:
        raise error_from_violation(
            error, ErrorContext(operation="issue_transcript", caller=issuer),
        )
    return IssuancePlan(
        transcript_id=TranscriptId(state.config.next_transcript_id),
        fee=FeeTransfer(
            amount=state.config.issuance_fee,
            sender=issuer,
            recipient=state.config.fee_recipient,
        ),
    )


def build_transcript(
    plan: IssuancePlan,
    request: IssuanceRequest,
    issuer: Identity,
    now: BlockHeight,
) -> Transcript:
    """The record a planned issuance will store. Pure."""
    return Transcript(
        id=plan.transcript_id,
        student=request.student,
        issuer=issuer,
        content_hash=bytes(request.content_hash),
        gpa=request.gpa,
        courses=tuple(request.courses),
        timestamp=now,
        degree=request.degree,
        major=request.major,
        institution=request.institution,
        graduation_date=request.graduation_date,
        credits=request.credits,
        location=request.location,
        status=True,
    )


def commit_issuance(state: RegistryState, transcript: Transcript) -> TranscriptId:
    """Store the transcript, index it, advance the counter. Call only after the fee moved."""
    state.transcripts[transcript.id] = transcript
    append_to_index(state, transcript.student, transcript.id)
    state.config.next_transcript_id = transcript.id + 1
    return transcript.id


# --- Amendment ----------------------------------------------------------------

@dataclass(frozen=True)
class AmendmentPlan:
    """Validated amendment awaiting its timestamp."""
    transcript: Transcript
    gpa: int
    courses: tuple[str, ...]
    updater: Identity


def plan_update(
    state: RegistryState,
    transcript_id: TranscriptId,
    gpa: int,
    courses: Sequence[str],
    updater: Identity,
) -> AmendmentPlan:
    """Check existence, then ownership, then the new fields. Raises the first failure. Pure."""
    transcript = state.transcripts.get(transcript_id)
    error = (
        _check_exists(transcript, transcript_id)
        or check_update_ownership(transcript, updater)
        or validate_update_fields(gpa, courses)
    )
    if error:
        raise error_from_violation(
            error,
            ErrorContext(
                operation="update_transcript", caller=updater,
                transcript_id=transcript_id,
            ),
        )
    return AmendmentPlan(
        transcript=transcript, gpa=gpa, courses=tuple(courses), updater=updater,
    )


def build_amendment(
    plan: AmendmentPlan, now: BlockHeight,
) -> tuple[Transcript, TranscriptUpdate]:
    """Amended transcript plus its update record. Pure."""
    amended = dataclasses.replace(
        plan.transcript, gpa=plan.gpa, courses=plan.courses, timestamp=now,
    )
    record = TranscriptUpdate(
        gpa=plan.gpa, courses=plan.courses, timestamp=now, updater=plan.updater,
    )
    return amended, record


def commit_amendment(
    state: RegistryState, amended: Transcript, record: TranscriptUpdate,
) -> None:
    state.transcripts[amended.id] = amended
    state.transcript_updates[amended.id] = record


def update_transcript(
    state: RegistryState,
    transcript_id: TranscriptId,
    gpa: int,
    courses: Sequence[str],
    updater: Identity,
    now: BlockHeight,
) -> TranscriptUpdate:
    """Overwrite GPA, courses and timestamp; overwrite the single update record."""
    plan = plan_update(state, transcript_id, gpa, courses, updater)
    amended, record = build_amendment(plan, now)
    commit_amendment(state, amended, record)
    return record


# --- Lookups ------------------------------------------------------------------

def get_transcript(state: RegistryState, transcript_id: int) -> Transcript | None:
    return state.transcripts.get(TranscriptId(transcript_id))


def get_transcript_update(
    state: RegistryState, transcript_id: int,
) -> TranscriptUpdate | None:
    return state.transcript_updates.get(TranscriptId(transcript_id))


def transcript_count(state: RegistryState) -> int:
    return state.transcript_count


def verify_hash(state: RegistryState, transcript_id: int, candidate: bytes) -> bool:
    """Byte-for-byte equality of the full stored hash — length included."""
    transcript = state.transcripts.get(TranscriptId(transcript_id))
    error = _check_exists(transcript, transcript_id)
    if error:
        raise error_from_violation(
            error, ErrorContext(operation="verify_hash", transcript_id=transcript_id),
        )
    return transcript.content_hash == bytes(candidate)


def _check_exists(transcript: Transcript | None, transcript_id: int) -> dict | None:
    if transcript is None:
        return violation(
            FailureKind.NOT_FOUND,
            f"Transcript {transcript_id} not found.",
            transcript_id=transcript_id,
        )
    return None
