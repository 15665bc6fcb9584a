"""Admin Schemas — configuration and allow-list payloads."""

from pydantic import BaseModel, Field, field_validator


class FeeRecipientSet(BaseModel):
    recipient: str = Field(min_length=1)

    @field_validator("recipient")
    @classmethod
    def strip_recipient(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("recipient cannot be empty or whitespace")
        return v


class IssuanceFeeSet(BaseModel):
    fee: int = Field(ge=0)


class MaxTranscriptsSet(BaseModel):
    max_transcripts: int = Field(ge=0)


class IssuerAdd(BaseModel):
    issuer: str = Field(min_length=1)


class RegistryConfigResponse(BaseModel):
    fee_recipient: str | None
    issuance_fee: int
    max_transcripts: int
    transcript_count: int
    administrator: str | None
    issuers: list[str]
