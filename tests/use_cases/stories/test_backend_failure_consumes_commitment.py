"""Story: Backend failure during redemption burns the commitment."""

from __future__ import annotations

import pytest

from lnurlpay.client.resolver import PayResolver
from lnurlpay.domain.errors import LnurlServiceError
from lnurlpay.infrastructure.commitment_repository_impl import (
    InMemoryCommitmentRepository,
)
from tests.fixtures import FakePaymentBackend


@pytest.mark.asyncio
async def test_backend_failure_consumes_commitment(
    resolver: PayResolver,
    fake_backend: FakePaymentBackend,
    commitment_repository: InMemoryCommitmentRepository,
) -> None:
    """
    Story: The service's node cannot mint a payment request.

    The payer sees a generic error, and the commitment cannot be retried.
    """
    # Given: Fresh Pay Parameters and a node that refuses to mint
    params = await resolver.fetch_pay_params("http://example.com:80/pay")
    fake_backend.fail_create = True

    # When: The payer redeems
    with pytest.raises(LnurlServiceError) as exc_info:
        await resolver.fetch_payment_request(params.callback, 2500)

    # Then: The backend detail is not leaked
    assert exc_info.value.status_code == 500
    assert exc_info.value.reason == "invoice error"
    assert len(commitment_repository) == 0

    # And: Retrying after the node recovers still fails
    fake_backend.fail_create = False
    with pytest.raises(LnurlServiceError, match="unknown or already redeemed id"):
        await resolver.fetch_payment_request(params.callback, 2500)
