"""Registry Records — immutable value objects stored and exchanged by the core.

Invariants:
    - Transcript and TranscriptUpdate are frozen: an update REPLACES the record,
      never mutates it in place (readers holding the old object see a consistent value)
    - courses stored as tuple — callers cannot append behind the validator's back
    - Transcript.status is always True (no operation clears it)

Design Decisions:
    - Frozen dataclasses over dicts: the store is an arena of values, not documents
    - IssuanceRequest bundles the 10 caller-supplied fields so rule chains take one argument
"""

from collections.abc import Sequence
from dataclasses import dataclass

from transcript_registry.core.domain_types import (
    BlockHeight, Identity, TranscriptId,
)


@dataclass(frozen=True)
class IssuanceRequest:
    """Caller-supplied fields for a new transcript. Unvalidated."""
    student: Identity
    content_hash: bytes
    gpa: int
    courses: Sequence[str]
    degree: str
    major: str
    institution: str
    graduation_date: int
    credits: int
    location: str


@dataclass(frozen=True)
class Transcript:
    """A stored transcript record."""
    id: TranscriptId
    student: Identity
    issuer: Identity
    content_hash: bytes
    gpa: int
    courses: tuple[str, ...]
    timestamp: BlockHeight
    degree: str
    major: str
    institution: str
    graduation_date: int
    credits: int
    location: str
    status: bool = True


@dataclass(frozen=True)
class TranscriptUpdate:
    """Latest amendment to a transcript — overwritten, never appended."""
    gpa: int
    courses: tuple[str, ...]
    timestamp: BlockHeight
    updater: Identity


@dataclass(frozen=True)
class FeeTransfer:
    """Issuance fee movement requested from the ledger."""
    amount: int
    sender: Identity
    recipient: Identity
