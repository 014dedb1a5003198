"""Phase 1 of the pay protocol: issue a metadata commitment."""

from __future__ import annotations

import logging
import secrets
from typing import Callable, Optional

from ...crypto.lnurl_codec import encode_url
from ...domain.entities import Commitment
from ...domain.repositories import CommitmentRepository
from ..dtos import PAY_REQUEST_TAG, PayParamsDTO
from ..shared.metadata import build_metadata_text
from ..validators import validate_sendable_bounds

logger = logging.getLogger(__name__)

NONCE_BYTES = 32
ID_BYTES = 10
DEFAULT_HTTP_PORT = 80


def lightning_address(username: str, host: str, port: int) -> str:
    """`user@host`, with `:port` appended unless it is the default HTTP port."""
    address = f"{username}@{host}"
    if port != DEFAULT_HTTP_PORT:
        address += f":{port}"
    return address


class IssuerService:
    """Builds fresh commitments and the Pay Parameters that advertise them."""

    def __init__(
        self,
        commitment_repo: CommitmentRepository,
        *,
        protocol: str,
        host: str,
        port: int,
        min_sendable: int,
        max_sendable: int,
        username: Optional[str] = None,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ):
        validate_sendable_bounds(min_sendable, max_sendable)
        self.commitment_repo = commitment_repo
        self.protocol = protocol
        self.host = host
        self.port = port
        self.min_sendable = min_sendable
        self.max_sendable = max_sendable
        self.username = username
        self._random_bytes = random_bytes

    def callback_url(self, commitment_id: str) -> str:
        return (
            f"{self.protocol}://{self.host}:{self.port}/invoice?id={commitment_id}"
        )

    async def issue(self, identifier_path: bool = False) -> PayParamsDTO:
        """Register a new commitment and return the Pay Parameters for it.

        Args:
            identifier_path: True when the request came in through the
                Lightning Address endpoint; adds a text/identifier entry.
        """
        if identifier_path and not self.username:
            raise ValueError("no username configured for Lightning Address requests")

        raw = self._random_bytes(NONCE_BYTES)
        commitment_id = raw[:ID_BYTES].hex()

        identifier = None
        if identifier_path:
            identifier = lightning_address(self.username, self.host, self.port)

        commitment = Commitment(
            id=commitment_id,
            metadata_text=build_metadata_text(raw.hex(), identifier),
        )
        await self.commitment_repo.put(commitment)
        logger.info(
            "Issued commitment %s (identifier path: %s)", commitment_id, identifier_path
        )

        return PayParamsDTO(
            callback=self.callback_url(commitment_id),
            max_sendable=self.max_sendable,
            min_sendable=self.min_sendable,
            metadata=commitment.metadata_text,
            tag=PAY_REQUEST_TAG,
        )

    def pay_codes(self) -> dict[str, str]:
        """The static ways a payer can reach this service."""
        pay_url = f"{self.protocol}://{self.host}:{self.port}/pay"
        lnurl = encode_url(pay_url)
        codes = {
            "lnurl": lnurl,
            "lightning": f"lightning:{lnurl}",
            "lnurlp": pay_url.replace(self.protocol, "lnurlp", 1),
        }
        if self.username:
            codes["address"] = lightning_address(self.username, self.host, self.port)
        return codes
