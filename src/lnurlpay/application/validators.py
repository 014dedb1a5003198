"""Pure validation functions for pay amounts and sendable bounds.

These functions contain the protocol's amount rules and can be tested in
isolation without repositories, backends or HTTP.
"""

from __future__ import annotations

from typing import Optional

from ..domain.errors import AmountOutOfBoundsError, InvalidAmountError


def parse_amount(raw: Optional[str]) -> int:
    """Parse a millisatoshi amount from a query string value.

    Raises:
        InvalidAmountError: if the value is missing, not an integer, or not
            positive.
    """
    if raw is None or raw == "":
        raise InvalidAmountError("expected 'amount' field")
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidAmountError(f"amount must be an integer, got {raw!r}")
    amount = int(raw)
    if amount <= 0:
        raise InvalidAmountError(f"amount must be positive, got {amount}")
    return amount


def validate_sendable_bounds(min_sendable: int, max_sendable: int) -> None:
    """Ensure 0 < min_sendable <= max_sendable."""
    if min_sendable <= 0:
        raise ValueError(f"minSendable must be > 0, got {min_sendable}")
    if min_sendable > max_sendable:
        raise ValueError(
            f"minSendable {min_sendable} exceeds maxSendable {max_sendable}"
        )


def is_within_bounds(amount: int, min_sendable: int, max_sendable: int) -> bool:
    return min_sendable <= amount <= max_sendable


def validate_amount_bounds(amount: int, min_sendable: int, max_sendable: int) -> None:
    """Raise AmountOutOfBoundsError unless min_sendable <= amount <= max_sendable."""
    if not is_within_bounds(amount, min_sendable, max_sendable):
        raise AmountOutOfBoundsError(
            f"Expected an amount between {min_sendable} and {max_sendable}, "
            f"got {amount}"
        )
