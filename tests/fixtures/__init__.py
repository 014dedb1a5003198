"""Test fixtures for in-memory implementations."""

from .fake_payment_backend import FakePaymentBackend

__all__ = [
    "FakePaymentBackend",
]
