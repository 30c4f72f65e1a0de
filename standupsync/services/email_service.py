"""Invitation email delivery through the Postmark HTTP API."""

import logging
from typing import Optional

import httpx

from standupsync.settings import Settings

logger = logging.getLogger(__name__)

POSTMARK_URL = "https://api.postmarkapp.com/email"


class EmailService:
    """Sends plain-text invitation emails.

    Delivery is skipped with a warning when no Postmark key is configured.

    Args:
        settings: Application settings (Postmark key, sender, frontend URL).
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._settings.postmark_api_key)

    @property
    def login_url(self) -> str:
        return f"{self._settings.frontend_url.rstrip('/')}/login"

    def render_invitation(
        self, to_name: Optional[str], to_email: str, inviter_name: str, temporary_password: str
    ) -> str:
        return (
            f"Hi {to_name or 'there'},\n\n"
            f"{inviter_name} has invited you to join their team on StandupSync.\n\n"
            f"Email: {to_email}\n"
            f"Temporary password: {temporary_password}\n\n"
            f"Log in at {self.login_url} and change your password after your first login.\n\n"
            "If you didn't expect this invitation, you can safely ignore this email.\n"
        )

    async def send_invitation(
        self,
        to_email: str,
        to_name: Optional[str],
        inviter_name: str,
        temporary_password: str,
    ) -> bool:
        """Send the invitation email.

        Returns:
            True if Postmark accepted the message, False if sending was skipped.

        Raises:
            httpx.HTTPError: On network failure or a non-2xx Postmark response.
        """
        if not self.enabled:
            logger.warning(f"invitation_email_skipped: reason=postmark_not_configured, to={to_email}")
            return False

        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            response = await client.post(
                POSTMARK_URL,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "X-Postmark-Server-Token": self._settings.postmark_api_key or "",
                },
                json={
                    "From": self._settings.postmark_from_email,
                    "To": to_email,
                    "Subject": "You're invited to StandupSync",
                    "TextBody": self.render_invitation(
                        to_name, to_email, inviter_name, temporary_password
                    ),
                    "MessageStream": "outbound",
                },
            )
        response.raise_for_status()

        logger.info(f"invitation_email_sent: to={to_email}")
        return True
