"""Shared pytest fixtures for pay service tests."""

from __future__ import annotations

import pytest
from fastapi import FastAPI

from lnurlpay.api.app import create_app
from lnurlpay.envs.server_env import Settings
from lnurlpay.infrastructure.commitment_repository_impl import (
    InMemoryCommitmentRepository,
)
from tests.fixtures import FakePaymentBackend


@pytest.fixture
def server_settings() -> Settings:
    """Service published at http://example.com with user alice."""
    return Settings(
        protocol="http",
        host="example.com",
        port=80,
        username="alice",
        min_sendable=1000,
        max_sendable=5000,
    )


@pytest.fixture
def commitment_repository() -> InMemoryCommitmentRepository:
    return InMemoryCommitmentRepository()


@pytest.fixture
def fake_backend() -> FakePaymentBackend:
    return FakePaymentBackend()


@pytest.fixture
def pay_app(
    server_settings: Settings,
    fake_backend: FakePaymentBackend,
    commitment_repository: InMemoryCommitmentRepository,
) -> FastAPI:
    """Pay service wired to in-memory collaborators (lifespan not started)."""
    return create_app(
        settings=server_settings,
        backend=fake_backend,
        commitments=commitment_repository,
    )
