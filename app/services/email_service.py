# app/services/email_service.py
"""
Email notification service for content authors.

Uses the Resend API to deliver single plain-text messages. Delivery is
fire-and-forget: the caller gets a status dict back, never an exception.
"""

import logging
from typing import Any

from app.config import get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Service for sending one templated message to one address.

    Uses Resend API for delivery.
    """

    def __init__(self):
        """Initialize email service with settings."""
        self.settings = get_settings()
        self._resend_client = None

    @property
    def resend_client(self):
        """Lazy-load Resend client."""
        if self._resend_client is None and self.settings.RESEND_API_KEY:
            import resend

            resend.api_key = self.settings.RESEND_API_KEY
            self._resend_client = resend
        return self._resend_client

    def send_message(
        self,
        recipient: str | None,
        subject: str,
        body: str,
    ) -> dict[str, Any]:
        """
        Send a plain-text email.

        Args:
            recipient: Destination address
            subject: Subject line
            body: Plain-text body

        Returns:
            Dict with status ("sent", "skipped" or "failed"), message_id and any errors
        """
        if not self.settings.EMAIL_ENABLED:
            logger.info("[EMAIL] Email notifications disabled")
            return {"status": "skipped", "reason": "EMAIL_ENABLED=false"}

        if not self.settings.RESEND_API_KEY:
            logger.warning("[EMAIL] RESEND_API_KEY not configured")
            return {"status": "skipped", "reason": "RESEND_API_KEY not set"}

        if not recipient:
            logger.warning(f"[EMAIL] No recipient for '{subject}'")
            return {"status": "failed", "error": "No recipient address"}

        try:
            response = self.resend_client.Emails.send(
                {
                    "from": self.settings.EMAIL_FROM,
                    "to": [recipient],
                    "subject": subject,
                    "text": body,
                }
            )

            logger.info(
                f"[EMAIL] Sent '{subject}' to {recipient}, id={response.get('id')}",
                extra={"event": "email_sent", "recipient": recipient},
            )
            return {
                "status": "sent",
                "message_id": response.get("id"),
                "recipient": recipient,
            }

        except Exception as e:
            logger.error(
                f"[EMAIL] Failed to send '{subject}' to {recipient}: {e}",
                extra={"event": "email_failed", "recipient": recipient},
            )
            return {"status": "failed", "error": str(e)}
