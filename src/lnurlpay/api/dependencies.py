"""FastAPI dependencies for the pay API.

The commitment repository and the payment backend belong to the application
instance (`app.state`), so two apps in one process never share commitments.
"""

from __future__ import annotations

from fastapi import Depends, FastAPI, Request

from ..application.use_cases.issuer import IssuerService
from ..application.use_cases.redeemer import RedeemerService
from ..domain.repositories import CommitmentRepository
from ..domain.shared import PaymentBackendProtocol
from ..envs.server_env import Settings
from ..infrastructure.lnd.lnd_rest_backend import LndRestBackend


def ensure_payment_backend(app: FastAPI) -> PaymentBackendProtocol:
    """Return the app's backend, connecting to LND on first use."""
    if app.state.backend is None:
        app.state.backend = LndRestBackend.from_settings(app.state.settings)
    return app.state.backend


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_commitment_repository(request: Request) -> CommitmentRepository:
    return request.app.state.commitments


def get_payment_backend(request: Request) -> PaymentBackendProtocol:
    return ensure_payment_backend(request.app)


def get_issuer_service(
    settings: Settings = Depends(get_settings_dependency),
    commitment_repo: CommitmentRepository = Depends(get_commitment_repository),
) -> IssuerService:
    return IssuerService(
        commitment_repo,
        protocol=settings.protocol,
        host=settings.host,
        port=settings.port,
        min_sendable=settings.min_sendable,
        max_sendable=settings.max_sendable,
        username=settings.username,
    )


def get_redeemer_service(
    settings: Settings = Depends(get_settings_dependency),
    commitment_repo: CommitmentRepository = Depends(get_commitment_repository),
    backend: PaymentBackendProtocol = Depends(get_payment_backend),
) -> RedeemerService:
    return RedeemerService(
        commitment_repo,
        backend,
        min_sendable=settings.min_sendable,
        max_sendable=settings.max_sendable,
    )
