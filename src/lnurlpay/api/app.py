"""FastAPI application configuration (pay service)."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from ..application.use_cases.issuer import IssuerService
from ..domain.repositories import CommitmentRepository
from ..domain.shared import PaymentBackendProtocol
from ..envs.server_env import Settings, get_settings
from ..infrastructure.commitment_repository_impl import InMemoryCommitmentRepository
from ..infrastructure.sweeper import CommitmentSweeper
from .dependencies import ensure_payment_backend
from .routers import invoice, pay

logger = logging.getLogger(__name__)


def _log_pay_codes(settings: Settings, commitments: CommitmentRepository) -> None:
    codes = IssuerService(
        commitments,
        protocol=settings.protocol,
        host=settings.host,
        port=settings.port,
        min_sendable=settings.min_sendable,
        max_sendable=settings.max_sendable,
        username=settings.username,
    ).pay_codes()
    logger.info("Your static LNURL-pay codes:")
    for code in codes.values():
        logger.info("  - %s", code)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    _log_pay_codes(settings, app.state.commitments)

    backend = ensure_payment_backend(app)
    info = await backend.get_node_info()
    logger.info("Connected to node with alias: %s", info.alias)

    sweeper: Optional[CommitmentSweeper] = None
    if settings.commitment_ttl_seconds:
        sweeper = CommitmentSweeper(
            app.state.commitments,
            settings.commitment_ttl_seconds,
            settings.sweep_interval_seconds,
        )
        sweeper.start()
    try:
        yield
    finally:
        if sweeper is not None:
            await sweeper.stop()
        await backend.aclose()


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[PaymentBackendProtocol] = None,
    commitments: Optional[CommitmentRepository] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="LNURL-pay service",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.backend = backend
    app.state.commitments = (
        commitments if commitments is not None else InMemoryCommitmentRepository()
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(pay.router)
    app.include_router(invoice.router)
    app.mount("/metrics", make_asgi_app())

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    return app


app = create_app()
