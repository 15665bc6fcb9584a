"""Transcript Schemas — Pydantic models for issuance, amendment, and lookup payloads.

Invariants:
    - content_hash travels as hex (optional 0x prefix); non-hex input rejected here
    - A well-formed hex hash of the wrong length passes here and fails INVALID_HASH in core
    - GPA, credits, lengths and course counts are NOT bounded here — core owns those rules

Design Decisions:
    - field_validator for side-effect-free transforms (strip 0x, lowercase)
    - Response models built from core records via from_record classmethods
"""

from pydantic import BaseModel, Field, field_validator

from transcript_registry.core.domain_types import Identity
from transcript_registry.core.records import (
    IssuanceRequest, Transcript, TranscriptUpdate,
)

_HEX_PATTERN = r"^(0x)?([0-9a-fA-F]{2})*$"


def _normalize_hex(value: str) -> str:
    value = value.strip()
    if value.startswith("0x"):
        value = value[2:]
    return value.lower()


class TranscriptIssue(BaseModel):
    """Issuance request — shape only, domain rules enforced by core."""
    student: str = Field(min_length=1)
    content_hash: str = Field(pattern=_HEX_PATTERN)
    gpa: int
    courses: list[str] = Field(default_factory=list)
    degree: str
    major: str
    institution: str
    graduation_date: int
    credits: int
    location: str = ""

    @field_validator("content_hash")
    @classmethod
    def normalize_hash(cls, v: str) -> str:
        return _normalize_hex(v)

    def to_request(self) -> IssuanceRequest:
        return IssuanceRequest(
            student=Identity(self.student),
            content_hash=bytes.fromhex(self.content_hash),
            gpa=self.gpa,
            courses=list(self.courses),
            degree=self.degree,
            major=self.major,
            institution=self.institution,
            graduation_date=self.graduation_date,
            credits=self.credits,
            location=self.location,
        )


class TranscriptAmend(BaseModel):
    """Amendment request — GPA and course list only."""
    gpa: int
    courses: list[str]


class HashVerification(BaseModel):
    content_hash: str = Field(pattern=_HEX_PATTERN)

    @field_validator("content_hash")
    @classmethod
    def normalize_hash(cls, v: str) -> str:
        return _normalize_hex(v)

    @property
    def hash_bytes(self) -> bytes:
        return bytes.fromhex(self.content_hash)


class TranscriptResponse(BaseModel):
    """Public transcript view."""
    id: int
    student: str
    issuer: str
    content_hash: str
    gpa: int
    courses: list[str]
    timestamp: int
    degree: str
    major: str
    institution: str
    graduation_date: int
    credits: int
    location: str
    status: bool

    @classmethod
    def from_record(cls, transcript: Transcript) -> "TranscriptResponse":
        return cls(
            id=transcript.id,
            student=transcript.student,
            issuer=transcript.issuer,
            content_hash=transcript.content_hash.hex(),
            gpa=transcript.gpa,
            courses=list(transcript.courses),
            timestamp=transcript.timestamp,
            degree=transcript.degree,
            major=transcript.major,
            institution=transcript.institution,
            graduation_date=transcript.graduation_date,
            credits=transcript.credits,
            location=transcript.location,
            status=transcript.status,
        )


class TranscriptUpdateResponse(BaseModel):
    """Latest amendment record."""
    gpa: int
    courses: list[str]
    timestamp: int
    updater: str

    @classmethod
    def from_record(cls, update: TranscriptUpdate) -> "TranscriptUpdateResponse":
        return cls(
            gpa=update.gpa,
            courses=list(update.courses),
            timestamp=update.timestamp,
            updater=update.updater,
        )


class TranscriptLookup(BaseModel):
    """get() result — transcript is null when absent (not an error)."""
    transcript: TranscriptResponse | None


class TranscriptUpdateLookup(BaseModel):
    update: TranscriptUpdateResponse | None


class IssueResult(BaseModel):
    id: int


class CountResult(BaseModel):
    count: int


class VerificationResult(BaseModel):
    id: int
    valid: bool


class StudentTranscripts(BaseModel):
    student: str
    transcript_ids: list[int]
