"""Registry Snapshot — serialization / deserialization for RegistryState.

Invariants:
    - registry_to_snapshot produces a JSON-safe dict (no bytes, no sets, no tuples, str keys)
    - registry_from_snapshot reconstructs an equivalent RegistryState
    - Missing keys fall back to RegistryState defaults (forward-compatible)

Design Decisions:
    - Hashes stored as lowercase hex: readable in the JSON column and in logs
    - Transcript ids stored as dict keys (str) AND inside each record: the record
      is self-describing, the key keeps lookups O(1) after load
    - Settings and single records serialize on their own: the shell persists one
      settings row plus one row per transcript, never the whole registry per call
"""

from transcript_registry.core.domain_types import (
    DEFAULT_ISSUANCE_FEE, DEFAULT_MAX_TRANSCRIPTS,
    BlockHeight, Identity, TranscriptId,
)
from transcript_registry.core.records import Transcript, TranscriptUpdate
from transcript_registry.core.registry_state import (
    AccessList, AdminConfig, RegistryState,
)


# --- Records ------------------------------------------------------------------

def transcript_to_dict(transcript: Transcript) -> dict:
    return {
        "id": transcript.id,
        "student": transcript.student,
        "issuer": transcript.issuer,
        "content_hash": transcript.content_hash.hex(),
        "gpa": transcript.gpa,
        "courses": list(transcript.courses),
        "timestamp": transcript.timestamp,
        "degree": transcript.degree,
        "major": transcript.major,
        "institution": transcript.institution,
        "graduation_date": transcript.graduation_date,
        "credits": transcript.credits,
        "location": transcript.location,
        "status": transcript.status,
    }


def transcript_from_dict(data: dict) -> Transcript:
    return Transcript(
        id=TranscriptId(data["id"]),
        student=Identity(data["student"]),
        issuer=Identity(data["issuer"]),
        content_hash=bytes.fromhex(data["content_hash"]),
        gpa=data["gpa"],
        courses=tuple(data.get("courses", [])),
        timestamp=BlockHeight(data.get("timestamp", 0)),
        degree=data["degree"],
        major=data["major"],
        institution=data["institution"],
        graduation_date=data["graduation_date"],
        credits=data["credits"],
        location=data.get("location", ""),
        status=data.get("status", True),
    )


def update_to_dict(update: TranscriptUpdate) -> dict:
    return {
        "gpa": update.gpa,
        "courses": list(update.courses),
        "timestamp": update.timestamp,
        "updater": update.updater,
    }


def update_from_dict(data: dict) -> TranscriptUpdate:
    return TranscriptUpdate(
        gpa=data["gpa"],
        courses=tuple(data.get("courses", [])),
        timestamp=BlockHeight(data.get("timestamp", 0)),
        updater=Identity(data["updater"]),
    )


# --- State --------------------------------------------------------------------

def settings_to_snapshot(config: AdminConfig, access: AccessList) -> dict:
    """Configuration and allow-list sections only. Pure, no IO."""
    return {
        "config": {
            "fee_recipient": config.fee_recipient,
            "issuance_fee": config.issuance_fee,
            "max_transcripts": config.max_transcripts,
            "next_transcript_id": config.next_transcript_id,
        },
        "access": {
            "administrator": access.administrator,
            "issuers": sorted(access.issuers),
        },
    }


def registry_to_snapshot(state: RegistryState) -> dict:
    """Serialize RegistryState to JSON-safe dict. Pure, no IO."""
    return {
        **settings_to_snapshot(state.config, state.access),
        "transcripts": {
            str(tid): transcript_to_dict(t) for tid, t in state.transcripts.items()
        },
        "transcript_updates": {
            str(tid): update_to_dict(u)
            for tid, u in state.transcript_updates.items()
        },
        "transcripts_by_student": {
            student: list(ids)
            for student, ids in state.transcripts_by_student.items()
        },
    }


def registry_from_snapshot(data: dict) -> RegistryState:
    """Reconstruct RegistryState from snapshot dict. Pure, no IO.

    Missing keys fall back to defaults. Lists are converted back to
    sets/tuples where the state holds them.
    """
    state = RegistryState()
    if not data:
        return state

    config = data.get("config", {})
    recipient = config.get("fee_recipient")
    state.config = AdminConfig(
        fee_recipient=Identity(recipient) if recipient else None,
        issuance_fee=config.get("issuance_fee", DEFAULT_ISSUANCE_FEE),
        max_transcripts=config.get("max_transcripts", DEFAULT_MAX_TRANSCRIPTS),
        next_transcript_id=config.get("next_transcript_id", 0),
    )

    access = data.get("access", {})
    administrator = access.get("administrator")
    state.access = AccessList(
        administrator=Identity(administrator) if administrator else None,
        issuers={Identity(i) for i in access.get("issuers", [])},
    )

    state.transcripts = {
        TranscriptId(int(tid)): transcript_from_dict(t)
        for tid, t in data.get("transcripts", {}).items()
    }
    state.transcript_updates = {
        TranscriptId(int(tid)): update_from_dict(u)
        for tid, u in data.get("transcript_updates", {}).items()
    }
    state.transcripts_by_student = {
        Identity(student): [TranscriptId(i) for i in ids]
        for student, ids in data.get("transcripts_by_student", {}).items()
    }
    return state
