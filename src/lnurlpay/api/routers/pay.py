"""Phase-1 routes: static pay endpoint and Lightning Address lookup."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter

from ...application.dtos import PayParamsDTO
from ...application.use_cases.issuer import IssuerService
from ..errors import error_response
from ..dependencies import get_issuer_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pay"])

WELL_KNOWN_PATH = "lnurlp"

pay_requests_total = Counter(
    "lnurlpay_pay_requests_total",
    "Total pay parameter requests served",
    ["path", "status"],
)


async def _issue(
    service: IssuerService, identifier_path: bool, path_label: str
) -> PayParamsDTO | JSONResponse:
    try:
        params = await service.issue(identifier_path=identifier_path)
    except Exception:
        pay_requests_total.labels(path=path_label, status="server_error").inc()
        logger.exception("Failed to issue commitment")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "could not issue pay request"
        )
    pay_requests_total.labels(path=path_label, status="success").inc()
    return params


@router.get("/pay", response_model=PayParamsDTO)
async def pay(
    service: IssuerService = Depends(get_issuer_service),
) -> PayParamsDTO | JSONResponse:
    """Issue Pay Parameters for the static LNURL."""
    return await _issue(service, identifier_path=False, path_label="static")


@router.get(f"/.well-known/{WELL_KNOWN_PATH}/{{username}}", response_model=PayParamsDTO)
async def lightning_address(
    username: str = Path(..., description="Lightning Address user name"),
    service: IssuerService = Depends(get_issuer_service),
) -> PayParamsDTO | JSONResponse:
    """Issue Pay Parameters for `username@host`."""
    if not service.username or username != service.username:
        pay_requests_total.labels(path="identifier", status="not_found").inc()
        return error_response(status.HTTP_404_NOT_FOUND, f"unknown user {username!r}")
    return await _issue(service, identifier_path=True, path_label="identifier")
