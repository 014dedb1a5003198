from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, field_validator


class Settings(BaseModel):
    target: str
    amount_msat: int = 0
    max_fee_msat: int = 1000
    no_tls: bool = False

    lnd_rest_host: str
    lnd_tls_cert_path: Optional[str] = None
    lnd_macaroon_path: str

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Pay target cannot be empty")
        return v.strip()

    @field_validator("amount_msat", "max_fee_msat")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("amounts must be >= 0")
        return v


def get_settings() -> Settings:
    target = os.environ.get("LNURLPAY_TARGET")
    macaroon_path = os.environ.get("LND_MACAROON_PATH")
    if not (target and macaroon_path):
        raise ValueError("LNURLPAY_TARGET and LND_MACAROON_PATH are required")
    return Settings(
        target=target,
        amount_msat=int(os.environ.get("LNURLPAY_AMOUNT_MSAT", "0")),
        max_fee_msat=int(os.environ.get("LNURLPAY_MAX_FEE_MSAT", "1000")),
        no_tls=os.environ.get("LNURLPAY_NO_TLS", "false").lower() == "true",
        lnd_rest_host=os.environ.get("LND_REST_HOST", "127.0.0.1:10013"),
        lnd_tls_cert_path=os.environ.get("LND_TLS_CERT_PATH") or None,
        lnd_macaroon_path=macaroon_path,
    )
