from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator


class Settings(BaseModel):
    """Typed server settings built from environment variables."""

    # Public address advertised in callbacks and pay codes
    protocol: str = "http"
    host: str = "localhost"
    port: int = 8080
    username: Optional[str] = None

    min_sendable: int = 1000
    max_sendable: int = 100_000_000

    commitment_ttl_seconds: Optional[float] = None
    sweep_interval_seconds: float = 60.0

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_debug: bool = False
    api_cors_origins: list[str] = ["*"]

    app_name: str = "LNURL-pay"
    app_version: str = "0.1.0"

    # LND REST connection
    lnd_rest_host: str = "127.0.0.1:8080"
    lnd_tls_cert_path: Optional[str] = None
    lnd_macaroon_path: str = "admin.macaroon"

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        if v not in {"http", "https"}:
            raise ValueError("protocol must be 'http' or 'https'")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and ("@" in v or "/" in v or not v.strip()):
            raise ValueError("username must be a non-empty name without '@' or '/'")
        return v

    @model_validator(mode="after")
    def validate_sendable_bounds(self) -> "Settings":
        if self.min_sendable <= 0:
            raise ValueError("min_sendable must be > 0")
        if self.min_sendable > self.max_sendable:
            raise ValueError("min_sendable must not exceed max_sendable")
        return self


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() == "true"


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    ttl_str = os.environ.get("LNURLPAY_COMMITMENT_TTL_SECONDS")
    return Settings(
        protocol=os.environ.get("LNURLPAY_PROTOCOL", "http"),
        host=os.environ.get("LNURLPAY_HOST", "localhost"),
        port=int(os.environ.get("LNURLPAY_PORT", "8080")),
        username=os.environ.get("LNURLPAY_USERNAME") or None,
        min_sendable=int(os.environ.get("LNURLPAY_MIN_SENDABLE", "1000")),
        max_sendable=int(os.environ.get("LNURLPAY_MAX_SENDABLE", "100000000")),
        commitment_ttl_seconds=float(ttl_str) if ttl_str else None,
        sweep_interval_seconds=float(
            os.environ.get("LNURLPAY_SWEEP_INTERVAL_SECONDS", "60")
        ),
        api_host=os.environ.get("API_HOST", "0.0.0.0"),
        api_port=int(os.environ.get("API_PORT", "8080")),
        api_debug=_env_bool("API_DEBUG"),
        api_cors_origins=os.environ.get("API_CORS_ORIGINS", "*").split(","),
        app_name=os.environ.get("APP_NAME", "LNURL-pay"),
        app_version=os.environ.get("APP_VERSION", "0.1.0"),
        lnd_rest_host=os.environ.get("LND_REST_HOST", "127.0.0.1:8080"),
        lnd_tls_cert_path=os.environ.get("LND_TLS_CERT_PATH") or None,
        lnd_macaroon_path=os.environ.get("LND_MACAROON_PATH", "admin.macaroon"),
    )
