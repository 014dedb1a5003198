"""Payment backend implemented over LND's REST API."""

from __future__ import annotations

import base64
import logging
import os
import ssl
from typing import Any, Dict, Optional, Protocol, Union

import httpx

from ...domain.entities import DecodedPaymentRequest, NodeInfo, PaymentResult
from ...domain.errors import BackendError
from ..http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)


class HasLndSettings(Protocol):
    lnd_rest_host: str
    lnd_tls_cert_path: Optional[str]
    lnd_macaroon_path: str


def _read_macaroon_hex(macaroon_path: str) -> str:
    if not os.path.isfile(macaroon_path):
        raise BackendError(f"Macaroon not found at {macaroon_path}")
    with open(macaroon_path, "rb") as f:
        return f.read().hex()


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


def _b64_to_hex(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return base64.b64decode(value).hex()


class LndRestBackend:
    """Talks to an LND node through its REST gateway.

    Authentication is the admin macaroon sent as a hex header; the node's
    self-signed TLS certificate is pinned as the only trusted CA.
    """

    def __init__(
        self,
        host: str,
        macaroon_path: str,
        tls_cert_path: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {
            "Grpc-Metadata-macaroon": _read_macaroon_hex(macaroon_path),
            "Content-Type": "application/json",
        }
        verify: Union[bool, ssl.SSLContext] = True
        if tls_cert_path:
            verify = ssl.create_default_context(cafile=tls_cert_path)
        self._http = AsyncHttpClient(
            f"https://{host}",
            timeout=timeout,
            headers=headers,
            verify=verify,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: HasLndSettings) -> "LndRestBackend":
        return cls(
            host=settings.lnd_rest_host,
            macaroon_path=settings.lnd_macaroon_path,
            tls_cert_path=settings.lnd_tls_cert_path,
        )

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            if method == "GET":
                resp = await self._http.get(path, raise_for_status=False)
            else:
                resp = await self._http.post(path, json=json, raise_for_status=False)
        except httpx.RequestError as e:
            raise BackendError(f"could not reach LND at {path}: {e}") from e
        if resp.is_error:
            raise BackendError(f"LND {path} failed: {_error_detail(resp)}")
        try:
            return resp.json()
        except ValueError as e:
            raise BackendError(f"LND {path} returned a non-JSON body") from e

    async def get_node_info(self) -> NodeInfo:
        data = await self._request("GET", "/v1/getinfo")
        return NodeInfo(
            alias=data.get("alias", ""), identity_pubkey=data.get("identity_pubkey")
        )

    async def create_payment_request(
        self, memo: str, value_msat: int, description_hash: bytes
    ) -> str:
        payload = {
            "memo": memo,
            "value_msat": str(value_msat),
            "description_hash": base64.b64encode(description_hash).decode("utf-8"),
        }
        data = await self._request("POST", "/v1/invoices", json=payload)
        payment_request = data.get("payment_request")
        if not payment_request:
            raise BackendError("LND returned no payment request")
        return payment_request

    async def decode_payment_request(
        self, payment_request: str
    ) -> DecodedPaymentRequest:
        data = await self._request("GET", f"/v1/payreq/{payment_request}")
        description_hash = data.get("description_hash")
        num_msat = data.get("num_msat")
        return DecodedPaymentRequest(
            payment_request=payment_request,
            description_hash=bytes.fromhex(description_hash)
            if description_hash
            else None,
            amount_msat=int(num_msat) if num_msat not in (None, "", "0") else None,
            payment_hash=data.get("payment_hash"),
            destination=data.get("destination"),
        )

    async def pay_payment_request(
        self, payment_request: str, max_fee_msat: int
    ) -> PaymentResult:
        payload = {
            "payment_request": payment_request,
            "fee_limit": {"fixed_msat": str(max_fee_msat)},
        }
        data = await self._request("POST", "/v1/channels/transactions", json=payload)
        if data.get("payment_error"):
            raise BackendError(f"payment failed: {data['payment_error']}")
        preimage = _b64_to_hex(data.get("payment_preimage"))
        if not preimage:
            raise BackendError("LND reported success without a preimage")
        route = data.get("payment_route") or {}
        total_msat = route.get("total_amt_msat")
        return PaymentResult(
            payment_request=payment_request,
            preimage=preimage,
            payment_hash=_b64_to_hex(data.get("payment_hash")),
            amount_msat=int(total_msat) if total_msat else None,
        )

    async def aclose(self) -> None:
        await self._http.aclose()
