"""SQL Registry Repository + Session Manager — persistence tests on in-memory SQLite.

Tests cover:
    - load_snapshot → None on an empty database; reassembles settings + transcript rows
    - save_issuance: one row per transcript, counter in the same commit,
      before_commit runs between flush and commit, duplicate id rejected before any fee
    - save_amendment rewrites one row in place
    - record_operation writes the log only, accepts long callers
    - DatabaseSessionManager maps SQLAlchemy failures to DatabaseError
    - health_check reports connectivity
"""

import pytest
from sqlalchemy import func, select, text

from transcript_registry.core.errors import DatabaseError, LedgerTransferFailedError
from transcript_registry.core.registry_snapshot import (
    registry_from_snapshot, settings_to_snapshot, transcript_to_dict, update_to_dict,
)
from transcript_registry.core.records import TranscriptUpdate
from transcript_registry.core.transcript_store import build_transcript, plan_issuance
from transcript_registry.models.operation_log import OperationLog
from transcript_registry.models.registry_settings import RegistrySettings
from transcript_registry.models.transcript_record import TranscriptRecord
from tests.factories import (
    ISSUER, OTHER_STUDENT, STUDENT, make_request, make_state,
)


def _transcript_dict(transcript_id: int, student: str = STUDENT) -> dict:
    state = make_state()
    state.config.next_transcript_id = transcript_id
    request = make_request(student=student)
    plan = plan_issuance(state, request, ISSUER)
    return transcript_to_dict(build_transcript(plan, request, ISSUER, 100))


def _settings(next_id: int) -> dict:
    state = make_state(next_transcript_id=next_id)
    return settings_to_snapshot(state.config, state.access)


async def _noop() -> None:
    return None


async def _count(session_factory, column) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count(column)))


# ─── Load ────────────────────────────────────────────────────────

async def test_empty_database_has_no_snapshot(repository):
    assert await repository.load_snapshot() is None


async def test_settings_alone_load(repository):
    await repository.save_settings(_settings(0))
    snapshot = await repository.load_snapshot()
    assert snapshot["config"]["fee_recipient"] == "ST2VERIFIER"
    assert snapshot["transcripts"] == {}


async def test_load_reassembles_transcripts_and_student_index(repository):
    await repository.save_issuance(_settings(1), _transcript_dict(0), _noop)
    await repository.save_issuance(_settings(2), _transcript_dict(1, OTHER_STUDENT), _noop)
    await repository.save_issuance(_settings(3), _transcript_dict(2), _noop)

    state = registry_from_snapshot(await repository.load_snapshot())
    assert state.config.next_transcript_id == 3
    assert sorted(state.transcripts) == [0, 1, 2]
    assert state.transcripts_by_student == {STUDENT: [0, 2], OTHER_STUDENT: [1]}
    assert state.transcripts[1].content_hash == bytes([1] * 32)


# ─── Issuance ────────────────────────────────────────────────────

async def test_issuance_writes_one_row_per_transcript(repository, test_session_factory):
    for tid in range(3):
        await repository.save_issuance(_settings(tid + 1), _transcript_dict(tid), _noop)

    assert await _count(test_session_factory, TranscriptRecord.id) == 3
    assert await _count(test_session_factory, RegistrySettings.id) == 1
    async with test_session_factory() as session:
        row = await session.get(TranscriptRecord, 2)
    assert row.student == STUDENT
    assert row.latest_update is None


async def test_before_commit_sees_flushed_rows(repository, test_session_factory):
    calls = []

    async def transfer():
        calls.append("transfer")

    await repository.save_issuance(_settings(1), _transcript_dict(0), transfer)
    assert calls == ["transfer"]
    assert await _count(test_session_factory, TranscriptRecord.id) == 1


async def test_failed_transfer_stores_nothing(repository, test_session_factory):
    async def transfer():
        raise LedgerTransferFailedError("insufficient balance")

    with pytest.raises(LedgerTransferFailedError):
        await repository.save_issuance(_settings(1), _transcript_dict(0), transfer)

    assert await repository.load_snapshot() is None
    assert await _count(test_session_factory, TranscriptRecord.id) == 0


async def test_duplicate_id_rejected_before_transfer(repository):
    calls = []

    async def transfer():
        calls.append("transfer")

    await repository.save_issuance(_settings(1), _transcript_dict(0), _noop)
    with pytest.raises(DatabaseError) as exc_info:
        await repository.save_issuance(_settings(1), _transcript_dict(0), transfer)
    assert exc_info.value.http_status == 503
    assert calls == []

    snapshot = await repository.load_snapshot()
    assert list(snapshot["transcripts"]) == ["0"]


# ─── Amendment ───────────────────────────────────────────────────

async def test_amendment_rewrites_row_in_place(repository, test_session_factory):
    await repository.save_issuance(_settings(1), _transcript_dict(0), _noop)
    amended = {**_transcript_dict(0), "gpa": 390, "courses": ["Art"]}
    update = update_to_dict(TranscriptUpdate(390, ("Art",), 150, ISSUER))
    await repository.save_amendment(amended, update)

    state = registry_from_snapshot(await repository.load_snapshot())
    assert state.transcripts[0].gpa == 390
    assert state.transcript_updates[0].timestamp == 150
    assert await _count(test_session_factory, TranscriptRecord.id) == 1


async def test_amendment_of_missing_row_fails(repository):
    with pytest.raises(DatabaseError):
        await repository.save_amendment(_transcript_dict(5), {"gpa": 1})


# ─── Operation log ───────────────────────────────────────────────

async def test_record_operation_writes_log_only(repository, test_session_factory):
    await repository.record_operation(
        "add_issuer", "ST2FAKE", {"issuer": "X"}, None, "UNAUTHORIZED",
    )
    async with test_session_factory() as session:
        logs = (await session.execute(select(OperationLog))).scalars().all()
    assert len(logs) == 1
    assert logs[0].error_code == "UNAUTHORIZED"
    assert logs[0].created_at is not None
    assert await repository.load_snapshot() is None


async def test_record_operation_accepts_long_caller(repository, test_session_factory):
    caller = "ST" + "X" * 300
    await repository.record_operation("add_issuer", caller, {}, None, "UNAUTHORIZED")
    async with test_session_factory() as session:
        row = (await session.execute(select(OperationLog))).scalars().one()
    assert row.caller == caller


# ─── Session manager ─────────────────────────────────────────────

async def test_session_maps_sqlalchemy_errors(test_db_manager):
    with pytest.raises(DatabaseError) as exc_info:
        async with test_db_manager.session() as session:
            await session.execute(text("SELECT * FROM no_such_table"))
    assert exc_info.value.http_status == 503
    assert exc_info.value.code == "DATABASE_ERROR"


async def test_health_check(test_db_manager):
    assert await test_db_manager.health_check() is True
