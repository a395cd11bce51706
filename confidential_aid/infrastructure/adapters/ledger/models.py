"""Wire models for the ledger relay HTTP API.

Pydantic models for the JSON bodies exchanged with the relay. Numeric ledger
slots arrive as ints, decimal strings or hex strings and are normalised the
same way AidRequest.from_ledger does.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from confidential_aid.domain.models.aid_request import coerce_int


class RecordIdsResponse(BaseModel):
    """Body of GET /records."""

    model_config = ConfigDict(extra="ignore")

    ids: list[str] = Field(default_factory=list)


class RecordPayload(BaseModel):
    """Body of GET /records/{id}."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str = ""
    description: str = ""
    category: int = 0
    secondary_value: int = 0
    created_at: int = 0
    creator: str = ""
    verified: bool = False
    revealed_value: int = 0

    @field_validator(
        "category", "secondary_value", "created_at", "revealed_value", mode="before"
    )
    @classmethod
    def _coerce_numeric(cls, value: Any) -> int:
        return coerce_int(value)

    @field_validator("title", "description", "creator", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class CiphertextHandleResponse(BaseModel):
    """Body of GET /records/{id}/ciphertext."""

    handle: str


class HealthResponse(BaseModel):
    """Body of GET /health."""

    available: bool = False


class ContextResponse(BaseModel):
    """Body of GET /context."""

    contract_address: str


class CreateRecordBody(BaseModel):
    """Body of POST /records. Binary fields are 0x-prefixed hex."""

    id: str
    title: str
    ciphertext: str
    proof: str
    category: int
    secondary_value: int = 0
    purpose_label: str
    sender: str


class VerificationBody(BaseModel):
    """Body of POST /records/{id}/verification."""

    encoded_clear_values: str
    proof: str
    sender: str


class BroadcastResponse(BaseModel):
    """Body returned by both write endpoints."""

    tx_hash: str


class TransactionStatus(str, Enum):
    """Inclusion state reported by GET /transactions/{hash}."""

    PENDING = "pending"
    INCLUDED = "included"
    REVERTED = "reverted"


class TransactionReceipt(BaseModel):
    """Body of GET /transactions/{hash}."""

    model_config = ConfigDict(extra="ignore")

    status: TransactionStatus
    reason: str | None = None


class RelayErrorCode(str, Enum):
    """Error codes the relay attaches to rejected requests."""

    NOT_FOUND = "not_found"
    ALREADY_VERIFIED = "already_verified"
    DUPLICATE_ID = "duplicate_id"
    USER_REJECTED = "user_rejected"
    REVERTED = "reverted"
    UNKNOWN = "unknown"


class RelayError(BaseModel):
    """Error body returned with 4xx/5xx responses."""

    model_config = ConfigDict(extra="ignore")

    code: RelayErrorCode = RelayErrorCode.UNKNOWN
    error: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def _unknown_code(cls, value: Any) -> Any:
        known = {member.value for member in RelayErrorCode}
        return value if value in known else RelayErrorCode.UNKNOWN.value
