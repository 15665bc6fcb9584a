"""Admin Routes — fee configuration, capacity, and issuer allow-list.

Invariants:
    - fee-recipient and issuance-fee follow their one-time setup ordering
      (ALREADY_CONFIGURED / NOT_CONFIGURED), whoever the caller is
    - max-transcripts and issuer changes require the administrator (UNAUTHORIZED)

Design Decisions:
    - 200 with {"status": "ok"} for mutations: no resource is created
"""

from fastapi import APIRouter, Depends

from transcript_registry.api.dependencies import get_caller, get_registry_service
from transcript_registry.core.domain_types import Identity
from transcript_registry.schemas.admin import (
    FeeRecipientSet,
    IssuanceFeeSet,
    IssuerAdd,
    MaxTranscriptsSet,
    RegistryConfigResponse,
)
from transcript_registry.services.registry_service import RegistryService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/config", response_model=RegistryConfigResponse)
async def get_config(registry: RegistryService = Depends(get_registry_service)):
    return RegistryConfigResponse(**registry.config_view())


@router.post("/fee-recipient")
async def set_fee_recipient(
    body: FeeRecipientSet,
    caller: Identity = Depends(get_caller),
    registry: RegistryService = Depends(get_registry_service),
):
    await registry.set_fee_recipient(Identity(body.recipient), caller)
    return {"status": "ok", "fee_recipient": body.recipient}


@router.put("/issuance-fee")
async def set_issuance_fee(
    body: IssuanceFeeSet,
    caller: Identity = Depends(get_caller),
    registry: RegistryService = Depends(get_registry_service),
):
    await registry.set_issuance_fee(body.fee, caller)
    return {"status": "ok", "issuance_fee": body.fee}


@router.put("/max-transcripts")
async def set_max_transcripts(
    body: MaxTranscriptsSet,
    caller: Identity = Depends(get_caller),
    registry: RegistryService = Depends(get_registry_service),
):
    await registry.set_max_transcripts(body.max_transcripts, caller)
    return {"status": "ok", "max_transcripts": body.max_transcripts}


@router.post("/issuers")
async def add_issuer(
    body: IssuerAdd,
    caller: Identity = Depends(get_caller),
    registry: RegistryService = Depends(get_registry_service),
):
    await registry.add_issuer(Identity(body.issuer), caller)
    return {"status": "ok", "issuer": body.issuer}


@router.delete("/issuers/{issuer}")
async def remove_issuer(
    issuer: str,
    caller: Identity = Depends(get_caller),
    registry: RegistryService = Depends(get_registry_service),
):
    await registry.remove_issuer(Identity(issuer), caller)
    return {"status": "ok", "issuer": issuer}
