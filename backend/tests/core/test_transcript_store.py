"""Transcript Store — tests for plan/commit issuance, amendment, and lookups.

Tests cover:
    - plan_issuance precedence: capacity → student → issuer → fields → recipient
    - plan_issuance is pure: a failed or successful plan mutates nothing
    - commit_issuance: sequential ids, stored record, student index, counter
    - update_transcript: NotFound → ownership → fields, record replaced atomically
    - plan_update / build_amendment / build_transcript are pure until commit
    - verify_hash: exact byte equality, NotFound for missing ids
    - Lookups return None for absent ids
    - Worked example: fee 500 → 1000, issue, update, verify
"""

import pytest

from transcript_registry.core.admin_config import set_fee_recipient, set_issuance_fee
from transcript_registry.core.domain_types import BURN_IDENTITY
from transcript_registry.core.errors import (
    MaxExceededError, NotConfiguredError, TranscriptNotFoundError,
    TranscriptValidationError, UnauthorizedError, UnauthorizedIssuerError,
)
from transcript_registry.core.registry_state import AccessList, RegistryState
from transcript_registry.core.student_index import list_for_student
from transcript_registry.core.transcript_store import (
    build_amendment,
    build_transcript,
    commit_amendment,
    commit_issuance,
    get_transcript,
    get_transcript_update,
    plan_issuance,
    plan_update,
    transcript_count,
    update_transcript,
    verify_hash,
)
from tests.factories import (
    ADMIN, HASH, ISSUER, OTHER_ISSUER, OTHER_STUDENT, RECIPIENT, STRANGER, STUDENT,
    make_request, make_state,
)


def _issue(state, request=None, issuer=ISSUER, now=1):
    request = request or make_request()
    plan = plan_issuance(state, request, issuer)
    return commit_issuance(state, build_transcript(plan, request, issuer, now))


# ─── plan_issuance ───────────────────────────────────────────────

def test_plan_returns_next_id_and_fee():
    state = make_state()
    plan = plan_issuance(state, make_request(), ISSUER)
    assert plan.transcript_id == 0
    assert plan.fee.amount == 500
    assert plan.fee.sender == ISSUER
    assert plan.fee.recipient == RECIPIENT


def test_plan_mutates_nothing():
    state = make_state()
    plan_issuance(state, make_request(), ISSUER)
    assert state.transcripts == {}
    assert state.transcripts_by_student == {}
    assert state.config.next_transcript_id == 0


def test_capacity_checked_first():
    state = make_state(configured=False, max_transcripts=0)
    with pytest.raises(MaxExceededError):
        plan_issuance(state, make_request(student=BURN_IDENTITY, gpa=999), STRANGER)


def test_student_checked_before_issuer():
    state = make_state()
    with pytest.raises(TranscriptValidationError) as exc_info:
        plan_issuance(state, make_request(student=BURN_IDENTITY), STRANGER)
    assert exc_info.value.code == "INVALID_STUDENT"


def test_issuer_checked_before_fields():
    state = make_state()
    with pytest.raises(UnauthorizedIssuerError):
        plan_issuance(state, make_request(gpa=999), STRANGER)


def test_fields_checked_before_recipient():
    state = make_state(configured=False)
    with pytest.raises(TranscriptValidationError) as exc_info:
        plan_issuance(state, make_request(gpa=401), ISSUER)
    assert exc_info.value.code == "INVALID_GPA"
    assert exc_info.value.field == "gpa"


def test_recipient_checked_last():
    state = make_state(configured=False)
    with pytest.raises(NotConfiguredError):
        plan_issuance(state, make_request(), ISSUER)


def test_plan_error_carries_context():
    state = make_state()
    with pytest.raises(UnauthorizedIssuerError) as exc_info:
        plan_issuance(state, make_request(), STRANGER)
    assert exc_info.value.context.operation == "issue_transcript"
    assert exc_info.value.context.caller == STRANGER


# ─── commit_issuance ─────────────────────────────────────────────

def test_commit_stores_transcript():
    state = make_state()
    tid = _issue(state, now=42)
    transcript = get_transcript(state, tid)
    assert transcript.id == 0
    assert transcript.student == STUDENT
    assert transcript.issuer == ISSUER
    assert transcript.content_hash == HASH
    assert transcript.gpa == 350
    assert transcript.courses == ("Math", "Science")
    assert transcript.timestamp == 42
    assert transcript.degree == "Bachelor"
    assert transcript.major == "Computer Science"
    assert transcript.institution == "UniversityX"
    assert transcript.graduation_date == 20230101
    assert transcript.credits == 120
    assert transcript.location == "CityZ"
    assert transcript.status is True


def test_ids_are_sequential():
    state = make_state()
    assert [_issue(state) for _ in range(3)] == [0, 1, 2]
    assert transcript_count(state) == 3


def test_commit_indexes_by_student_in_order():
    state = make_state()
    _issue(state)
    _issue(state, make_request(student=OTHER_STUDENT))
    _issue(state)
    assert list_for_student(state, STUDENT) == [0, 2]
    assert list_for_student(state, OTHER_STUDENT) == [1]


def test_commit_copies_courses():
    state = make_state()
    courses = ["Math"]
    tid = _issue(state, make_request(courses=courses))
    courses.append("Art")
    assert get_transcript(state, tid).courses == ("Math",)


def test_max_transcripts_one_allows_single_issuance():
    state = make_state(max_transcripts=1)
    assert _issue(state) == 0
    with pytest.raises(MaxExceededError):
        plan_issuance(state, make_request(), ISSUER)
    assert transcript_count(state) == 1


def test_failed_issuance_consumes_no_id():
    state = make_state()
    with pytest.raises(TranscriptValidationError):
        plan_issuance(state, make_request(degree=""), ISSUER)
    assert _issue(state) == 0


# ─── update_transcript ───────────────────────────────────────────

def test_update_replaces_gpa_courses_timestamp():
    state = make_state()
    tid = _issue(state, now=1)
    record = update_transcript(state, tid, 375, ["Math", "Physics"], ISSUER, now=9)

    transcript = get_transcript(state, tid)
    assert transcript.gpa == 375
    assert transcript.courses == ("Math", "Physics")
    assert transcript.timestamp == 9
    assert transcript.degree == "Bachelor"
    assert transcript.issuer == ISSUER

    assert record.gpa == 375
    assert record.courses == ("Math", "Physics")
    assert record.timestamp == 9
    assert record.updater == ISSUER
    assert get_transcript_update(state, tid) == record


def test_second_update_overwrites_first():
    state = make_state()
    tid = _issue(state)
    update_transcript(state, tid, 300, ["A"], ISSUER, now=2)
    update_transcript(state, tid, 310, ["B"], ISSUER, now=3)
    assert get_transcript_update(state, tid).gpa == 310
    assert get_transcript_update(state, tid).courses == ("B",)


def test_update_missing_transcript():
    state = make_state()
    with pytest.raises(TranscriptNotFoundError) as exc_info:
        update_transcript(state, 99, 300, [], ISSUER, now=1)
    assert exc_info.value.context.transcript_id == 99


def test_not_found_checked_before_ownership():
    state = make_state()
    with pytest.raises(TranscriptNotFoundError):
        update_transcript(state, 0, 999, [], STRANGER, now=1)


def test_update_by_other_issuer_rejected():
    state = make_state()
    tid = _issue(state)
    with pytest.raises(UnauthorizedError):
        update_transcript(state, tid, 300, ["X"], OTHER_ISSUER, now=2)
    assert get_transcript(state, tid).gpa == 350
    assert get_transcript_update(state, tid) is None


def test_ownership_checked_before_fields():
    state = make_state()
    tid = _issue(state)
    with pytest.raises(UnauthorizedError):
        update_transcript(state, tid, 999, ["c"] * 30, STRANGER, now=2)


def test_update_invalid_gpa_leaves_record_untouched():
    state = make_state()
    tid = _issue(state)
    with pytest.raises(TranscriptValidationError) as exc_info:
        update_transcript(state, tid, 401, ["X"], ISSUER, now=2)
    assert exc_info.value.code == "INVALID_GPA"
    assert get_transcript(state, tid).gpa == 350
    assert get_transcript_update(state, tid) is None


def test_update_too_many_courses():
    state = make_state()
    tid = _issue(state)
    with pytest.raises(TranscriptValidationError) as exc_info:
        update_transcript(state, tid, 300, ["c"] * 21, ISSUER, now=2)
    assert exc_info.value.code == "TOO_MANY_COURSES"


def test_plan_and_build_amendment_mutate_nothing():
    state = make_state()
    tid = _issue(state, now=1)
    plan = plan_update(state, tid, 375, ["Math"], ISSUER)
    amended, record = build_amendment(plan, 9)
    assert amended.gpa == 375
    assert record.timestamp == 9
    assert get_transcript(state, tid).gpa == 350
    assert get_transcript_update(state, tid) is None

    commit_amendment(state, amended, record)
    assert get_transcript(state, tid) == amended
    assert get_transcript_update(state, tid) == record


def test_build_transcript_mutates_nothing():
    state = make_state()
    request = make_request()
    transcript = build_transcript(plan_issuance(state, request, ISSUER), request, ISSUER, 4)
    assert transcript.id == 0
    assert transcript_count(state) == 0
    assert commit_issuance(state, transcript) == 0
    assert state.config.next_transcript_id == 1


def test_removed_issuer_may_still_update_own_transcript():
    state = make_state()
    tid = _issue(state)
    state.access.issuers.discard(ISSUER)
    update_transcript(state, tid, 320, ["Math"], ISSUER, now=2)
    assert get_transcript(state, tid).gpa == 320


# ─── verify_hash / lookups ───────────────────────────────────────

def test_verify_hash_exact_match():
    state = make_state()
    tid = _issue(state)
    assert verify_hash(state, tid, HASH) is True


def test_verify_hash_mismatch():
    state = make_state()
    tid = _issue(state)
    assert verify_hash(state, tid, bytes([2] * 32)) is False


def test_verify_hash_prefix_is_not_a_match():
    state = make_state()
    tid = _issue(state)
    assert verify_hash(state, tid, HASH[:16]) is False


def test_verify_hash_missing_transcript():
    with pytest.raises(TranscriptNotFoundError):
        verify_hash(make_state(), 0, HASH)


def test_lookups_return_none_when_absent():
    state = make_state()
    assert get_transcript(state, 0) is None
    assert get_transcript_update(state, 0) is None
    assert list_for_student(state, STUDENT) == []


def test_list_for_student_returns_copy():
    state = make_state()
    _issue(state)
    ids = list_for_student(state, STUDENT)
    ids.append(99)
    assert list_for_student(state, STUDENT) == [0]


# ─── Worked example ──────────────────────────────────────────────

def test_worked_example_fee_change_issue_update_verify():
    state = RegistryState(access=AccessList(administrator=ADMIN, issuers={ISSUER}))
    set_fee_recipient(state, RECIPIENT, ADMIN)
    set_issuance_fee(state, 1000, ADMIN)

    request = make_request()
    plan = plan_issuance(state, request, ISSUER)
    assert plan.fee.amount == 1000
    tid = commit_issuance(state, build_transcript(plan, request, ISSUER, 10))
    assert tid == 0

    update_transcript(state, tid, 375, ["Math", "Physics"], ISSUER, now=11)
    assert get_transcript(state, tid).gpa == 375
    assert get_transcript_update(state, tid).updater == ISSUER
    assert verify_hash(state, tid, HASH) is True
    assert transcript_count(state) == 1
