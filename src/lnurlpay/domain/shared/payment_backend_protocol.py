"""Protocol interface for payment backend implementations.

Everything the pay core needs from a Lightning node goes through this contract.
"""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities import DecodedPaymentRequest, NodeInfo, PaymentResult


class PaymentBackendProtocol(Protocol):
    """Contract for the node that mints and settles payment requests.

    Implementations raise `BackendError` for connectivity failures and for any
    call the node rejects.
    """

    async def get_node_info(self) -> "NodeInfo":
        """Return the identity of the connected node."""
        ...

    async def create_payment_request(
        self, memo: str, value_msat: int, description_hash: bytes
    ) -> str:
        """Mint a payment request for `value_msat` committing to `description_hash`.

        Returns:
            The encoded payment request.
        """
        ...

    async def decode_payment_request(
        self, payment_request: str
    ) -> "DecodedPaymentRequest":
        """Decode a payment request into the fields the resolver verifies."""
        ...

    async def pay_payment_request(
        self, payment_request: str, max_fee_msat: int
    ) -> "PaymentResult":
        """Pay a payment request, spending at most `max_fee_msat` in fees."""
        ...

    async def aclose(self) -> None:
        """Release any transport resources held by the backend."""
        ...
