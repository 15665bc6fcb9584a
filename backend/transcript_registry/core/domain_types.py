"""Domain Types — rich types and limits shared across the registry core.

Invariants:
    - Identity wraps str and is compared exactly (case-sensitive)
    - TranscriptId wraps int: dense, assigned from 0, never reused
    - Every field limit lives here — enforce_transcript reads them, nothing hardcodes them
    - Failure kinds encoded as a str Enum — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (error envelopes, operation log)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Identity = NewType("Identity", str)
TranscriptId = NewType("TranscriptId", int)


# ─── Value Types ─────────────────────────────────────────────────

BlockHeight = NewType("BlockHeight", int)   # ledger sequence height
ContentHash = NewType("ContentHash", bytes)  # exactly 32 bytes
Gpa = NewType("Gpa", int)                    # 0–400 (scaled x100)


# ─── Limits ──────────────────────────────────────────────────────

BURN_IDENTITY = Identity("SP000000000000000000002Q6VF78")

CONTENT_HASH_LENGTH: int = 32
MIN_GPA: int = 0
MAX_GPA: int = 400
MAX_COURSES: int = 20
MAX_DEGREE_LENGTH: int = 50
MAX_MAJOR_LENGTH: int = 50
MAX_INSTITUTION_LENGTH: int = 100
MAX_LOCATION_LENGTH: int = 100

DEFAULT_ISSUANCE_FEE: int = 500
DEFAULT_MAX_TRANSCRIPTS: int = 1_000_000


# ─── Enums ───────────────────────────────────────────────────────

class FailureKind(str, Enum):
    """Every user-visible failure of a registry operation."""
    # Configuration
    ALREADY_CONFIGURED = "ALREADY_CONFIGURED"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    # Authorization
    UNAUTHORIZED_ISSUER = "UNAUTHORIZED_ISSUER"
    UNAUTHORIZED = "UNAUTHORIZED"
    # Validation
    INVALID_STUDENT = "INVALID_STUDENT"
    INVALID_HASH = "INVALID_HASH"
    INVALID_GPA = "INVALID_GPA"
    TOO_MANY_COURSES = "TOO_MANY_COURSES"
    INVALID_DEGREE = "INVALID_DEGREE"
    INVALID_MAJOR = "INVALID_MAJOR"
    INVALID_INSTITUTION = "INVALID_INSTITUTION"
    INVALID_GRADUATION_DATE = "INVALID_GRADUATION_DATE"
    INVALID_CREDITS = "INVALID_CREDITS"
    INVALID_LOCATION = "INVALID_LOCATION"
    # Capacity
    MAX_EXCEEDED = "MAX_EXCEEDED"
    # Lookup
    NOT_FOUND = "NOT_FOUND"
    # Dependency
    LEDGER_TRANSFER_FAILED = "LEDGER_TRANSFER_FAILED"


VALIDATION_FAILURES: frozenset[FailureKind] = frozenset({
    FailureKind.INVALID_STUDENT,
    FailureKind.INVALID_HASH,
    FailureKind.INVALID_GPA,
    FailureKind.TOO_MANY_COURSES,
    FailureKind.INVALID_DEGREE,
    FailureKind.INVALID_MAJOR,
    FailureKind.INVALID_INSTITUTION,
    FailureKind.INVALID_GRADUATION_DATE,
    FailureKind.INVALID_CREDITS,
    FailureKind.INVALID_LOCATION,
})


class Operation(str, Enum):
    """Mutating registry operations — maps to the operation_log `operation` column."""
    SET_FEE_RECIPIENT = "set_fee_recipient"
    SET_ISSUANCE_FEE = "set_issuance_fee"
    SET_MAX_TRANSCRIPTS = "set_max_transcripts"
    ADD_ISSUER = "add_issuer"
    REMOVE_ISSUER = "remove_issuer"
    ISSUE_TRANSCRIPT = "issue_transcript"
    UPDATE_TRANSCRIPT = "update_transcript"
