"""Data Transfer Objects for the LNURL-pay wire format."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PAY_REQUEST_TAG = "payRequest"


class PayParamsDTO(BaseModel):
    """Phase-1 response: where to redeem, how much, and what is being paid for.

    `metadata` is the raw JSON text of the metadata pairs. It must reach the
    payer byte-for-byte because the payment request commits to its hash.
    """

    model_config = ConfigDict(populate_by_name=True)

    callback: str
    max_sendable: int = Field(alias="maxSendable")
    min_sendable: int = Field(alias="minSendable")
    metadata: str
    tag: str = PAY_REQUEST_TAG


class InvoiceResponseDTO(BaseModel):
    """Phase-2 response carrying the minted payment request."""

    pr: str
    routes: list[str] = Field(default_factory=list)


class ErrorResponseDTO(BaseModel):
    """LNURL error envelope."""

    status: Literal["ERROR"] = "ERROR"
    reason: str
