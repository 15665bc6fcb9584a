"""Student Routes — transcript ids per student, in issuance order."""

from fastapi import APIRouter, Depends

from transcript_registry.api.dependencies import get_registry_service
from transcript_registry.core.domain_types import Identity
from transcript_registry.schemas.transcript import StudentTranscripts
from transcript_registry.services.registry_service import RegistryService

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.get("/{student}/transcripts", response_model=StudentTranscripts)
async def list_student_transcripts(
    student: str,
    registry: RegistryService = Depends(get_registry_service),
):
    """Always 200 — a student with no transcripts gets an empty list."""
    return StudentTranscripts(
        student=student,
        transcript_ids=registry.list_for_student(Identity(student)),
    )
