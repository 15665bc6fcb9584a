"""Transcript Routes — issuance, amendment, lookup, and hash verification.

Invariants:
    - Every mutating route passes the resolved caller identity to the service
    - Lookups of absent transcripts return 200 with null, not 404 (absence is not an error)
    - verify on an absent transcript IS an error (404 NOT_FOUND)
    - /count registered before /{transcript_id} so it is not parsed as an id

Design Decisions:
    - Thin routes: no business logic, RegistryService + core own every rule
"""

import logging

from fastapi import APIRouter, Depends, status

from transcript_registry.api.dependencies import get_caller, get_registry_service
from transcript_registry.core.domain_types import Identity
from transcript_registry.schemas.transcript import (
    CountResult,
    HashVerification,
    IssueResult,
    TranscriptAmend,
    TranscriptIssue,
    TranscriptLookup,
    TranscriptResponse,
    TranscriptUpdateLookup,
    TranscriptUpdateResponse,
    VerificationResult,
)
from transcript_registry.services.registry_service import RegistryService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/transcripts", tags=["transcripts"])


@router.post(
    "", response_model=IssueResult, status_code=status.HTTP_201_CREATED,
)
async def issue_transcript(
    body: TranscriptIssue,
    caller: Identity = Depends(get_caller),
    registry: RegistryService = Depends(get_registry_service),
):
    """Issue a transcript. Moves the issuance fee from caller to the fee recipient."""
    transcript_id = await registry.issue(body.to_request(), caller)
    return IssueResult(id=transcript_id)


@router.get("/count", response_model=CountResult)
async def transcript_count(
    registry: RegistryService = Depends(get_registry_service),
):
    return CountResult(count=registry.count())


@router.get("/{transcript_id}", response_model=TranscriptLookup)
async def get_transcript(
    transcript_id: int,
    registry: RegistryService = Depends(get_registry_service),
):
    transcript = registry.get(transcript_id)
    return TranscriptLookup(
        transcript=TranscriptResponse.from_record(transcript) if transcript else None,
    )


@router.get("/{transcript_id}/update", response_model=TranscriptUpdateLookup)
async def get_transcript_update(
    transcript_id: int,
    registry: RegistryService = Depends(get_registry_service),
):
    """Latest amendment record for a transcript (null if never amended)."""
    update = registry.get_update(transcript_id)
    return TranscriptUpdateLookup(
        update=TranscriptUpdateResponse.from_record(update) if update else None,
    )


@router.patch("/{transcript_id}", response_model=TranscriptUpdateResponse)
async def update_transcript(
    transcript_id: int,
    body: TranscriptAmend,
    caller: Identity = Depends(get_caller),
    registry: RegistryService = Depends(get_registry_service),
):
    """Amend GPA and courses. Only the original issuer may call this."""
    record = await registry.update(transcript_id, body.gpa, body.courses, caller)
    return TranscriptUpdateResponse.from_record(record)


@router.post("/{transcript_id}/verify", response_model=VerificationResult)
async def verify_transcript_hash(
    transcript_id: int,
    body: HashVerification,
    registry: RegistryService = Depends(get_registry_service),
):
    valid = registry.verify_hash(transcript_id, body.hash_bytes)
    return VerificationResult(id=transcript_id, valid=valid)
