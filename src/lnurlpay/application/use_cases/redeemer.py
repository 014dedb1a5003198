"""Phase 2 of the pay protocol: redeem a commitment for a payment request."""

from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import BackendError, CommitmentNotFoundError, InputError
from ...domain.repositories import CommitmentRepository
from ...domain.shared import PaymentBackendProtocol
from ..dtos import InvoiceResponseDTO
from ..shared.metadata import description_hash
from ..validators import parse_amount, validate_amount_bounds

logger = logging.getLogger(__name__)

INVOICE_MEMO = "LNURL-pay"


class RedeemerService:
    """Consumes commitments and mints payment requests bound to their metadata."""

    def __init__(
        self,
        commitment_repo: CommitmentRepository,
        backend: PaymentBackendProtocol,
        *,
        min_sendable: int,
        max_sendable: int,
        memo: str = INVOICE_MEMO,
    ):
        self.commitment_repo = commitment_repo
        self.backend = backend
        self.min_sendable = min_sendable
        self.max_sendable = max_sendable
        self.memo = memo

    async def redeem(
        self, commitment_id: Optional[str], raw_amount: Optional[str]
    ) -> InvoiceResponseDTO:
        """Redeem `commitment_id` for a payment request of `raw_amount` msat.

        Input is validated before the commitment is touched. Once taken, the
        commitment is gone for good, even if the backend then fails.

        Raises:
            InvalidAmountError: missing, malformed or non-positive amount.
            AmountOutOfBoundsError: amount outside the advertised bounds.
            InputError: missing id.
            CommitmentNotFoundError: unknown or already redeemed id.
            BackendError: the backend could not mint the payment request.
        """
        if not commitment_id:
            raise InputError("expected 'id' field")
        amount = parse_amount(raw_amount)
        validate_amount_bounds(amount, self.min_sendable, self.max_sendable)

        commitment = await self.commitment_repo.take_and_remove(commitment_id)
        if commitment is None:
            raise CommitmentNotFoundError("unknown or already redeemed id")

        digest = description_hash(commitment.metadata_text)
        try:
            payment_request = await self.backend.create_payment_request(
                self.memo, amount, digest
            )
        except BackendError:
            logger.warning("Backend failed to mint invoice for %s", commitment_id)
            raise

        logger.info("Redeemed commitment %s for %d msat", commitment_id, amount)
        return InvoiceResponseDTO(pr=payment_request, routes=[])
