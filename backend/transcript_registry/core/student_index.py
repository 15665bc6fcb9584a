"""Student Index — student identity → transcript ids in issuance order.

Invariants:
    - Entries created lazily on first issuance to a student
    - Append-only: ids are never removed or reordered
    - list_for_student returns a copy; an unknown student yields []
"""

from transcript_registry.core.domain_types import Identity, TranscriptId
from transcript_registry.core.registry_state import RegistryState


def append_to_index(
    state: RegistryState, student: Identity, transcript_id: TranscriptId,
) -> None:
    state.transcripts_by_student.setdefault(student, []).append(transcript_id)


def list_for_student(state: RegistryState, student: Identity) -> list[TranscriptId]:
    return list(state.transcripts_by_student.get(student, []))
