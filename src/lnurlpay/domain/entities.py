"""Domain entities: Commitment and payment backend value objects."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Commitment(BaseModel):
    """Single-use binding between an opaque id and a metadata string.

    `metadata_text` is stored exactly as it was sent to the payer; its bytes are
    hashed at redemption time.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    metadata_text: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat()


class NodeInfo(BaseModel):
    """Identity of the node behind the payment backend."""

    alias: str
    identity_pubkey: Optional[str] = None


class DecodedPaymentRequest(BaseModel):
    """Fields of a payment request that the pay protocol cares about."""

    payment_request: str
    description_hash: Optional[bytes] = None
    amount_msat: Optional[int] = None
    payment_hash: Optional[str] = None
    destination: Optional[str] = None


class PaymentResult(BaseModel):
    """Outcome of a settled payment."""

    payment_request: str
    preimage: str
    payment_hash: Optional[str] = None
    amount_msat: Optional[int] = None
