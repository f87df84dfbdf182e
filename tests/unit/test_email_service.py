"""
Unit tests for EmailService.

Tests the send guards, the Resend payload, and failure handling.
"""

from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture
def mock_settings():
    """Create a mock settings object with email enabled."""
    settings = MagicMock()
    settings.EMAIL_ENABLED = True
    settings.RESEND_API_KEY = "re_test_key"
    settings.EMAIL_FROM = "Example <noreply@example.org>"
    return settings


def _service(mock_settings):
    with patch("app.services.email_service.get_settings", return_value=mock_settings):
        from app.services.email_service import EmailService

        return EmailService()


class TestEmailServiceSendGuards:
    """Tests for early-exit guards in send_message."""

    def test_email_disabled(self, mock_settings):
        """When EMAIL_ENABLED is False, returns skipped with reason."""
        mock_settings.EMAIL_ENABLED = False

        result = _service(mock_settings).send_message("a@example.org", "Subject", "Body")

        assert result["status"] == "skipped"
        assert result["reason"] == "EMAIL_ENABLED=false"

    def test_no_resend_key(self, mock_settings):
        """When RESEND_API_KEY is None, returns skipped with reason."""
        mock_settings.RESEND_API_KEY = None

        result = _service(mock_settings).send_message("a@example.org", "Subject", "Body")

        assert result["status"] == "skipped"
        assert result["reason"] == "RESEND_API_KEY not set"

    @pytest.mark.parametrize("recipient", [None, ""])
    def test_no_recipient(self, mock_settings, recipient):
        """An author without an address is a failed send."""
        service = _service(mock_settings)
        service._resend_client = MagicMock()

        result = service.send_message(recipient, "Subject", "Body")

        assert result["status"] == "failed"
        assert "error" in result
        service._resend_client.Emails.send.assert_not_called()


class TestEmailServiceSend:
    """Tests for the send flow."""

    def test_successful_send(self, mock_settings):
        """Sends a plain-text message to a single recipient."""
        service = _service(mock_settings)
        service._resend_client = MagicMock()
        service._resend_client.Emails.send.return_value = {"id": "msg_123"}

        result = service.send_message("author@example.org", "Post Expiration", "Hello")

        assert result == {"status": "sent", "message_id": "msg_123", "recipient": "author@example.org"}
        payload = service._resend_client.Emails.send.call_args[0][0]
        assert payload["from"] == "Example <noreply@example.org>"
        assert payload["to"] == ["author@example.org"]
        assert payload["subject"] == "Post Expiration"
        assert payload["text"] == "Hello"

    def test_send_exception_returns_failed(self, mock_settings):
        """A Resend error is reported, not raised."""
        service = _service(mock_settings)
        service._resend_client = MagicMock()
        service._resend_client.Emails.send.side_effect = Exception("API rate limit exceeded")

        result = service.send_message("author@example.org", "Post Expiration", "Hello")

        assert result["status"] == "failed"
        assert "API rate limit exceeded" in result["error"]

    def test_resend_client_is_lazy(self, mock_settings):
        """The resend module is only configured on first use."""
        service = _service(mock_settings)

        assert service._resend_client is None
        client = service.resend_client

        assert client is not None
        assert client.api_key == "re_test_key"
