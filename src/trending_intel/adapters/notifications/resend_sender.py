"""Resend email adapter."""

import httpx

from trending_intel.config import NewsletterConfig
from trending_intel.core import DeliveryError, EmailSender


class ResendEmailSender(EmailSender):
    """Send single emails through the Resend HTTP API."""

    def __init__(self, api_key: str, config: NewsletterConfig) -> None:
        """Initialize Resend sender.

        Args:
            api_key: Resend API key
            config: newsletter settings (sender address, site name, API base, timeout)
        """
        self.api_key = api_key
        self.config = config

    async def send(self, to: str, subject: str, html: str, unsubscribe_url: str) -> None:
        """Send one email.

        Raises:
            DeliveryError: on transport failure or a non-2xx response
        """
        payload = {
            "from": f"{self.config.site_name} <{self.config.sender_email}>",
            "to": [to],
            "subject": subject,
            "html": html,
            "headers": {
                "List-Unsubscribe": f"<{unsubscribe_url}>",
            },
        }

        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            try:
                response = await client.post(
                    f"{self.config.resend_api_base}/emails",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=payload,
                )
            except httpx.HTTPError as e:
                raise DeliveryError(f"Resend request failed: {e}") from e

        if not response.is_success:
            raise DeliveryError(f"Resend {response.status_code}: {response.text[:300]}")
