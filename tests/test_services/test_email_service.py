"""Tests for invitation email delivery."""

import json

import httpx
import pytest

from standupsync.services.email_service import POSTMARK_URL, EmailService
from standupsync.settings import Settings


def _settings(**overrides) -> Settings:
    values = {
        "postmark_api_key": "pm-test-key",
        "postmark_from_email": "noreply@standupsync.com",
        "frontend_url": "https://app.standupsync.com/",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestEmailService:
    """Tests for EmailService."""

    def test_login_url_strips_trailing_slash(self) -> None:
        """The login link is built from the frontend URL."""
        assert EmailService(_settings()).login_url == "https://app.standupsync.com/login"

    def test_render_invitation_contains_credentials(self) -> None:
        """The body names the inviter and carries the temporary password."""
        body = EmailService(_settings()).render_invitation(
            "Nia", "nia@example.com", "Ada", "Temp1234abcd"
        )
        assert "Hi Nia" in body
        assert "Ada has invited you" in body
        assert "Temporary password: Temp1234abcd" in body
        assert "https://app.standupsync.com/login" in body

    @pytest.mark.asyncio
    async def test_skipped_without_api_key(self) -> None:
        """No key means no request and a False result."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        service = EmailService(_settings(postmark_api_key=None), transport=httpx.MockTransport(handler))

        assert service.enabled is False
        assert await service.send_invitation("nia@example.com", "Nia", "Ada", "Temp1234abcd") is False

    @pytest.mark.asyncio
    async def test_posts_to_postmark(self) -> None:
        """A configured key sends one request with the server token header."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"ErrorCode": 0, "Message": "OK"})

        service = EmailService(_settings(), transport=httpx.MockTransport(handler))

        assert await service.send_invitation("nia@example.com", "Nia", "Ada", "Temp1234abcd") is True
        assert len(captured) == 1
        request = captured[0]
        assert str(request.url) == POSTMARK_URL
        assert request.headers["X-Postmark-Server-Token"] == "pm-test-key"
        payload = json.loads(request.content)
        assert payload["To"] == "nia@example.com"
        assert payload["From"] == "noreply@standupsync.com"
        assert payload["MessageStream"] == "outbound"
        assert "Temp1234abcd" in payload["TextBody"]

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        """Postmark rejections surface as httpx errors for the caller to handle."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"ErrorCode": 300, "Message": "Invalid email"})

        service = EmailService(_settings(), transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.HTTPStatusError):
            await service.send_invitation("bad", "Nia", "Ada", "Temp1234abcd")
