"""Client side of the pay protocol: resolve a target, redeem it, verify, pay."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Type
from types import TracebackType

import httpx
from pydantic import ValidationError

from ..application.dtos import PAY_REQUEST_TAG, InvoiceResponseDTO, PayParamsDTO
from ..application.shared.metadata import description_hash, plain_text_entry
from ..application.validators import is_within_bounds, validate_sendable_bounds
from ..crypto.lnurl_codec import LNURL_HRP, decode_url
from ..domain.entities import DecodedPaymentRequest, PaymentResult
from ..domain.errors import (
    AmountMismatchError,
    AmountOutOfBoundsError,
    DescriptionHashMismatchError,
    InsecureUrlError,
    LnurlServiceError,
    PaymentCancelledError,
    UnsupportedTargetError,
)
from ..domain.shared import PaymentBackendProtocol
from ..infrastructure.http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)

LIGHTNING_PREFIX = "lightning:"
LNURLP_SCHEME = "lnurlp"
WELL_KNOWN_PATH = "lnurlp"
DEFAULT_MAX_FEE_MSAT = 1000

# Called with (min_sendable, max_sendable, rejected_amount); returns a new
# amount to try, or None to give up.
AmountStrategy = Callable[[int, int, int], Optional[int]]


def resolve_target(target: str, use_tls: bool = True) -> str:
    """Normalize any accepted pay target into the URL to fetch.

    Accepted forms: a bech32 LNURL, `lightning:<LNURL>`, an `lnurlp://` URL, and
    a Lightning Address `user@domain`.
    """
    target = target.strip()
    scheme = "https" if use_tls else "http"
    lowered = target.lower()

    # lnurlp:// shares its first five letters with the bech32 prefix.
    if lowered.startswith(f"{LNURLP_SCHEME}://"):
        return scheme + target[len(LNURLP_SCHEME) :]

    if lowered.startswith(LIGHTNING_PREFIX):
        return decode_url(target[len(LIGHTNING_PREFIX) :])

    # bech32 tokens never contain "@".
    if lowered.startswith(LNURL_HRP) and "@" not in target:
        return decode_url(target)

    if "@" in target:
        parts = target.split("@")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise UnsupportedTargetError(
                "invalid Lightning Address, expected the form <username>@<domain>"
            )
        username, domain = parts
        return f"{scheme}://{domain}/.well-known/{WELL_KNOWN_PATH}/{username}"

    raise UnsupportedTargetError(f"unsupported pay target: {target!r}")


def require_secure_url(url: str, use_tls: bool = True) -> None:
    if use_tls and not url.lower().startswith("https://"):
        raise InsecureUrlError(f"url is not https: {url}")


def choose_amount(
    requested: int,
    min_sendable: int,
    max_sendable: int,
    strategy: Optional[AmountStrategy] = None,
) -> int:
    """Return `requested` if it is in bounds, otherwise ask `strategy` until it is."""
    amount = requested
    while not is_within_bounds(amount, min_sendable, max_sendable):
        if strategy is None:
            raise AmountOutOfBoundsError(
                f"Expected an amount between {min_sendable} and {max_sendable}, "
                f"got {amount}"
            )
        replacement = strategy(min_sendable, max_sendable, amount)
        if replacement is None:
            raise PaymentCancelledError("no amount chosen")
        amount = replacement
    return amount


def append_amount(callback: str, amount_msat: int) -> str:
    delim = "&" if "?" in callback else "?"
    return f"{callback}{delim}amount={amount_msat}"


class PayResolver:
    """Runs the pay exchange against a remote service and settles it.

    Legs run strictly in order: Pay Parameters, amount selection, payment
    request, hash verification, payment. Nothing is retried.
    """

    def __init__(
        self,
        backend: PaymentBackendProtocol,
        *,
        use_tls: bool = True,
        amount_strategy: Optional[AmountStrategy] = None,
        http: Optional[AsyncHttpClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.backend = backend
        self.use_tls = use_tls
        self.amount_strategy = amount_strategy
        self._http = http or AsyncHttpClient(timeout=timeout)

    async def _get_json(self, url: str) -> Any:
        try:
            resp = await self._http.get(url, raise_for_status=False)
        except httpx.RequestError as e:
            raise LnurlServiceError(f"GET request error: {e}") from e
        try:
            body = resp.json()
        except ValueError as e:
            raise LnurlServiceError(
                f"could not parse response body from {url}", resp.status_code
            ) from e
        if isinstance(body, dict) and body.get("status") == "ERROR":
            raise LnurlServiceError(
                str(body.get("reason") or "unspecified error"), resp.status_code
            )
        if resp.is_error:
            raise LnurlServiceError(
                f"unexpected HTTP {resp.status_code} from {url}", resp.status_code
            )
        return body

    async def fetch_pay_params(self, url: str) -> PayParamsDTO:
        body = await self._get_json(url)
        try:
            params = PayParamsDTO.model_validate(body)
        except ValidationError as e:
            raise LnurlServiceError(f"malformed pay parameters: {e}") from e
        if params.tag != PAY_REQUEST_TAG:
            raise LnurlServiceError(f"unexpected LNURL tag {params.tag!r}")
        try:
            validate_sendable_bounds(params.min_sendable, params.max_sendable)
        except ValueError as e:
            raise LnurlServiceError(str(e)) from e
        plain_text_entry(params.metadata)
        return params

    async def fetch_payment_request(
        self, callback: str, amount_msat: int
    ) -> InvoiceResponseDTO:
        body = await self._get_json(append_amount(callback, amount_msat))
        try:
            return InvoiceResponseDTO.model_validate(body)
        except ValidationError as e:
            raise LnurlServiceError(f"malformed invoice response: {e}") from e

    async def verify_payment_request(
        self, payment_request: str, metadata_text: str, amount_msat: int
    ) -> DecodedPaymentRequest:
        """Check that `payment_request` commits to `metadata_text` and the amount.

        Raises:
            DescriptionHashMismatchError: the description hash is missing or is
                not SHA-256 of the exact metadata string.
            AmountMismatchError: the request is for a different amount.
        """
        decoded = await self.backend.decode_payment_request(payment_request)
        if decoded.description_hash != description_hash(metadata_text):
            raise DescriptionHashMismatchError("invalid invoice description hash")
        if decoded.amount_msat is not None and decoded.amount_msat != amount_msat:
            raise AmountMismatchError(
                f"invoice is for {decoded.amount_msat} msat, requested {amount_msat}"
            )
        return decoded

    async def pay(
        self,
        target: str,
        amount_msat: int = 0,
        max_fee_msat: int = DEFAULT_MAX_FEE_MSAT,
    ) -> PaymentResult:
        url = resolve_target(target, self.use_tls)
        require_secure_url(url, self.use_tls)
        logger.info("Resolved pay target to %s", url)

        params = await self.fetch_pay_params(url)
        amount = choose_amount(
            amount_msat, params.min_sendable, params.max_sendable, self.amount_strategy
        )

        invoice = await self.fetch_payment_request(params.callback, amount)
        await self.verify_payment_request(invoice.pr, params.metadata, amount)

        result = await self.backend.pay_payment_request(invoice.pr, max_fee_msat)
        logger.info("Paid %d msat to %s", amount, url)
        return result

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "PayResolver":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()
