"""Pytest fixtures for pay story tests.

The payer's HTTP client is routed straight into the service's ASGI app, and a
single fake node plays both the service's and the payer's backend, so a
payment request minted by the service can be decoded and paid by the payer.
"""

from __future__ import annotations

from typing import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI

from lnurlpay.client.resolver import PayResolver
from lnurlpay.crypto.lnurl_codec import encode_url
from lnurlpay.infrastructure.http.http_client import AsyncHttpClient
from tests.fixtures import FakePaymentBackend


@pytest.fixture
def static_lnurl() -> str:
    """Static LNURL advertised by the service under test."""
    return encode_url("http://example.com:80/pay")


@pytest.fixture
def service_http(pay_app: FastAPI) -> AsyncHttpClient:
    return AsyncHttpClient(transport=httpx.ASGITransport(app=pay_app))


@pytest.fixture
async def resolver(
    fake_backend: FakePaymentBackend, service_http: AsyncHttpClient
) -> AsyncGenerator[PayResolver, None]:
    """Payer talking plain HTTP to the in-process service."""
    resolver = PayResolver(fake_backend, use_tls=False, http=service_http)
    yield resolver
    await resolver.aclose()
