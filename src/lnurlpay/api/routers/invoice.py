"""Phase-2 route: redeem a commitment for a payment request."""

from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from ...application.dtos import InvoiceResponseDTO
from ...application.use_cases.redeemer import RedeemerService
from ...domain.errors import BackendError, InputError, ProtocolError
from ..errors import error_response
from ..dependencies import get_redeemer_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["invoice"])

INVOICE_DURATION_BUCKETS = (
    [float(x) for x in (1, 2, 5, 10, 25, 50, 100, 250, 500)]
    + [1000.0, 2500.0, 5000.0]
    + [float("inf")]
)

invoice_requests_total = Counter(
    "lnurlpay_invoice_requests_total",
    "Total invoice (redemption) requests processed",
    ["status"],
)

invoice_request_duration_milliseconds = Histogram(
    "lnurlpay_invoice_request_duration_milliseconds",
    "Wall time to redeem a commitment, backend call included (ms)",
    ["status"],
    buckets=INVOICE_DURATION_BUCKETS,
)


def _observe(label: str, start_time: float) -> None:
    invoice_requests_total.labels(status=label).inc()
    elapsed = (time.perf_counter() - start_time) * 1000
    invoice_request_duration_milliseconds.labels(status=label).observe(elapsed)


@router.get("/invoice", response_model=InvoiceResponseDTO)
async def invoice(
    id: Optional[str] = Query(None, description="Commitment id from the callback"),
    amount: Optional[str] = Query(None, description="Amount in millisatoshis"),
    service: RedeemerService = Depends(get_redeemer_service),
) -> InvoiceResponseDTO | JSONResponse:
    """Consume a commitment and return a payment request bound to its metadata."""
    start_time = time.perf_counter()
    try:
        result = await service.redeem(id, amount)
    except (InputError, ProtocolError) as e:
        _observe("client_error", start_time)
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except BackendError as e:
        _observe("backend_error", start_time)
        logger.error("Invoice creation failed: %s", e)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "invoice error")
    except Exception:
        _observe("server_error", start_time)
        logger.exception("Failed to redeem commitment")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "invoice error")
    _observe("success", start_time)
    return result
