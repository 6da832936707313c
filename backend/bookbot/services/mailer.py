"""
Order confirmation mail service client.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from bookbot.core import logger, settings
from bookbot.services.http_utils import ExternalServiceError, build_client, request_with_retry


@dataclass
class ConfirmationResult:
    status: str  # sent, transport_error
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "sent"


class MailerClient:
    """Posts order confirmations to the mailing endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.MAIL_SERVICE_URL
        self._transport = transport

    async def send_order_confirmation(self, name: str, email: str, content: str) -> ConfirmationResult:
        """Send the confirmation. Failures are returned, not raised."""
        payload = {"name": name, "email": email, "content": content}
        try:
            async with build_client(self._transport) as client:
                await request_with_retry(
                    lambda: client.post(self.url, json=payload),
                    operation="Order confirmation",
                )
        except ExternalServiceError as exc:
            logger.error(f"Order confirmation for {email} failed: {exc}")
            return ConfirmationResult(status="transport_error", reason="request_failed")

        logger.info(f"Order confirmation sent to {email}")
        return ConfirmationResult(status="sent")
