"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .payment_backend_protocol import PaymentBackendProtocol

__all__ = ["PaymentBackendProtocol"]
