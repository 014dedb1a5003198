"""Unit tests for the phase-1 pay routes."""

import unittest
from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from lnurlpay.api.dependencies import get_issuer_service
from lnurlpay.api.routers.pay import router
from lnurlpay.application.dtos import PayParamsDTO

METADATA = '[["text/plain","abc123"]]'


class TestPayRouter(unittest.TestCase):
    """Test cases for the pay router."""

    def setUp(self):
        """Set up test fixtures."""
        self.app = FastAPI()
        self.app.include_router(router)

        self.pay_params = PayParamsDTO(
            callback="http://example.com:80/invoice?id=abc123",
            max_sendable=5000,
            min_sendable=1000,
            metadata=METADATA,
        )

        # Create mock service
        self.mock_service = AsyncMock()
        self.mock_service.username = "alice"

        # Override dependency
        self.app.dependency_overrides[get_issuer_service] = lambda: self.mock_service

        self.client = TestClient(self.app)

    def tearDown(self):
        """Clean up after tests."""
        self.app.dependency_overrides.clear()

    def test_pay_returns_pay_parameters(self):
        """Static endpoint serves the protocol field names and raw metadata."""
        # Arrange
        self.mock_service.issue.return_value = self.pay_params

        # Act
        response = self.client.get("/pay")

        # Assert
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "callback": "http://example.com:80/invoice?id=abc123",
                "maxSendable": 5000,
                "minSendable": 1000,
                "metadata": METADATA,
                "tag": "payRequest",
            },
        )
        self.mock_service.issue.assert_called_once_with(identifier_path=False)

    def test_metadata_is_not_html_escaped(self):
        self.mock_service.issue.return_value = self.pay_params

        response = self.client.get("/pay")

        self.assertIn('"metadata":"[[\\"text/plain\\",\\"abc123\\"]]"', response.text)
        self.assertNotIn("&quot;", response.text)

    def test_lightning_address_uses_identifier_path(self):
        self.mock_service.issue.return_value = self.pay_params

        response = self.client.get("/.well-known/lnurlp/alice")

        self.assertEqual(response.status_code, 200)
        self.mock_service.issue.assert_called_once_with(identifier_path=True)

    def test_lightning_address_unknown_user(self):
        """Unknown users get the LNURL error envelope."""
        response = self.client.get("/.well-known/lnurlp/bob")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["status"], "ERROR")
        self.assertIn("bob", response.json()["reason"])
        self.mock_service.issue.assert_not_called()

    def test_lightning_address_without_configured_user(self):
        self.mock_service.username = None

        response = self.client.get("/.well-known/lnurlp/alice")

        self.assertEqual(response.status_code, 404)
        self.mock_service.issue.assert_not_called()

    def test_issue_failure_returns_error_envelope(self):
        self.mock_service.issue.side_effect = RuntimeError("boom")

        response = self.client.get("/pay")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(), {"status": "ERROR", "reason": "could not issue pay request"}
        )
