"""Domain-specific exceptions."""

from __future__ import annotations


class LnurlPayError(Exception):
    """Base class for every error raised by the LNURL-pay core."""


class LnurlEncodingError(LnurlPayError, ValueError):
    """Raised when a bech32 token cannot be encoded or decoded."""


# Input errors: rejected before any network call.


class InputError(LnurlPayError, ValueError):
    """Raised for malformed caller input."""


class InvalidAmountError(InputError):
    """Raised when an amount is missing or not a positive integer."""


class UnsupportedTargetError(InputError):
    """Raised when a pay target is not an LNURL, lnurlp:// URL or address."""


class InsecureUrlError(InputError):
    """Raised when a resolved URL is not https and TLS was not waived."""


# Protocol errors: terminal for the exchange, never followed by a payment.


class ProtocolError(LnurlPayError):
    """Raised when a party violates the pay protocol."""


class CommitmentNotFoundError(ProtocolError):
    """Raised when a commitment id is unknown or was already redeemed."""


class AmountOutOfBoundsError(ProtocolError):
    """Raised when an amount falls outside [minSendable, maxSendable]."""


class MissingMetadataError(ProtocolError):
    """Raised when pay metadata is malformed or lacks a text/plain entry."""


class DescriptionHashMismatchError(ProtocolError):
    """Raised when a payment request is not bound to the advertised metadata."""


class AmountMismatchError(ProtocolError):
    """Raised when a payment request is for a different amount than requested."""


class LnurlServiceError(ProtocolError):
    """Raised when the remote service answers with an LNURL error envelope."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class PaymentCancelledError(ProtocolError):
    """Raised when the amount strategy gives up without choosing an amount."""


# Backend errors: surfaced verbatim, never retried.


class BackendError(LnurlPayError):
    """Raised when the payment backend fails to answer or rejects a call."""
