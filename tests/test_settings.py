"""Tests for settings sourced from environment variables."""

import pytest
from pydantic import ValidationError

from lnurlpay.envs import client_env, server_env


class TestServerSettings:
    """Test server settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "LNURLPAY_PROTOCOL",
            "LNURLPAY_HOST",
            "LNURLPAY_PORT",
            "LNURLPAY_USERNAME",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = server_env.get_settings()

        assert settings.protocol == "http"
        assert settings.host == "localhost"
        assert settings.port == 8080
        assert settings.username is None

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LNURLPAY_PROTOCOL", "https")
        monkeypatch.setenv("LNURLPAY_HOST", "pay.example.com")
        monkeypatch.setenv("LNURLPAY_PORT", "443")
        monkeypatch.setenv("LNURLPAY_USERNAME", "alice")
        monkeypatch.setenv("LNURLPAY_MIN_SENDABLE", "2000")
        monkeypatch.setenv("LNURLPAY_MAX_SENDABLE", "3000")
        monkeypatch.setenv("LNURLPAY_COMMITMENT_TTL_SECONDS", "600")

        settings = server_env.get_settings()

        assert settings.protocol == "https"
        assert settings.host == "pay.example.com"
        assert settings.port == 443
        assert settings.username == "alice"
        assert (settings.min_sendable, settings.max_sendable) == (2000, 3000)
        assert settings.commitment_ttl_seconds == 600.0

    def test_invalid_protocol_rejected(self) -> None:
        with pytest.raises(ValidationError):
            server_env.Settings(protocol="ftp")

    def test_invalid_username_rejected(self) -> None:
        with pytest.raises(ValidationError):
            server_env.Settings(username="alice@example.com")

    def test_inverted_bounds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            server_env.Settings(min_sendable=5000, max_sendable=1000)


class TestClientSettings:
    """Test payer settings."""

    def test_required_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LNURLPAY_TARGET", raising=False)
        monkeypatch.setenv("LND_MACAROON_PATH", "admin.macaroon")

        with pytest.raises(ValueError, match="LNURLPAY_TARGET"):
            client_env.get_settings()

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LNURLPAY_TARGET", " alice@example.com ")
        monkeypatch.setenv("LND_MACAROON_PATH", "admin.macaroon")
        monkeypatch.setenv("LNURLPAY_AMOUNT_MSAT", "2500")
        monkeypatch.setenv("LNURLPAY_NO_TLS", "true")

        settings = client_env.get_settings()

        assert settings.target == "alice@example.com"
        assert settings.amount_msat == 2500
        assert settings.no_tls is True
        assert settings.max_fee_msat == 1000

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            client_env.Settings(
                target="alice@example.com",
                amount_msat=-1,
                lnd_rest_host="127.0.0.1:10013",
                lnd_macaroon_path="admin.macaroon",
            )
