"""Registry State — the single process-wide state object the core operates on.

Invariants:
    - Constructed once at startup (or restored from snapshot); never re-initialized implicitly
    - config.next_transcript_id only grows; transcripts holds exactly ids [0, next_transcript_id)
    - transcripts_by_student lists only grow (append-only index)
    - transcript_updates holds at most one record per transcript id

Design Decisions:
    - Plain dataclasses, no IO: every component receives a reference to this object
      instead of reaching for module globals (ADR: explicit state, testable without mocks)
    - AdminConfig and AccessList kept as separate sections so configuration rules
      and authorization rules read only what they own
"""

from dataclasses import dataclass, field

from transcript_registry.core.domain_types import (
    DEFAULT_ISSUANCE_FEE, DEFAULT_MAX_TRANSCRIPTS, Identity, TranscriptId,
)
from transcript_registry.core.records import Transcript, TranscriptUpdate


@dataclass
class AdminConfig:
    """Fee and capacity configuration plus the identifier counter."""

    # Set at most once; issuance is blocked until it is set
    fee_recipient: Identity | None = None
    issuance_fee: int = DEFAULT_ISSUANCE_FEE
    max_transcripts: int = DEFAULT_MAX_TRANSCRIPTS
    next_transcript_id: int = 0

    @property
    def is_configured(self) -> bool:
        return self.fee_recipient is not None

    @property
    def at_capacity(self) -> bool:
        return self.next_transcript_id >= self.max_transcripts


@dataclass
class AccessList:
    """Issuer allow-list and the administrator capability."""
    administrator: Identity | None = None
    issuers: set[Identity] = field(default_factory=set)


@dataclass
class RegistryState:
    """Whole registry — pure dataclass, no IO."""

    config: AdminConfig = field(default_factory=AdminConfig)
    access: AccessList = field(default_factory=AccessList)

    # === TranscriptStore ===
    transcripts: dict[TranscriptId, Transcript] = field(default_factory=dict)
    transcript_updates: dict[TranscriptId, TranscriptUpdate] = field(default_factory=dict)

    # === StudentIndex ===
    transcripts_by_student: dict[Identity, list[TranscriptId]] = field(default_factory=dict)

    @property
    def transcript_count(self) -> int:
        """Total transcripts ever issued."""
        return self.config.next_transcript_id
