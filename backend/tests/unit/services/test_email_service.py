"""
Unit Tests for the email service
Tests for: sign-in email rendering, Resend delivery, SMTP delivery
"""
import json
from unittest.mock import AsyncMock, patch

import aiosmtplib
import httpx
import pytest

from kharcha.core.exceptions import EmailDeliveryError
from kharcha.services.email_service import EmailService

LINK = "http://kharcha.test/auth/callback?token=abc&email=asha%40example.com"


def resend_service(handler) -> EmailService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    service = EmailService(provider="resend", http_client=client)
    service.resend_api_key = "re_test_key"
    return service


class TestRendering:

    def test_sign_in_email(self):
        subject, html, text = EmailService(provider="resend").render_sign_in_email(LINK, 24)

        assert subject == "Sign in to kharcha.test"
        assert "Welcome to Kharcha" in html
        assert "expire in 24 hours" in html
        assert LINK in text
        assert "Welcome to Kharcha!" in text


class TestResend:

    async def test_posts_message(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "email_123"})

        service = resend_service(handler)
        await service.send_sign_in_email("asha@example.com", LINK, 24)

        [request] = requests
        assert request.headers["Authorization"] == "Bearer re_test_key"
        payload = json.loads(request.content)
        assert payload["to"] == ["asha@example.com"]
        assert payload["from"] == f"{service.from_name} <{service.from_email}>"
        assert payload["subject"] == "Sign in to kharcha.test"
        assert LINK in payload["text"]

    async def test_rejected_message(self):
        service = resend_service(lambda request: httpx.Response(422, json={"message": "invalid from"}))

        with pytest.raises(EmailDeliveryError) as exc_info:
            await service.send_email("asha@example.com", "Hi", "<p>Hi</p>")

        assert exc_info.value.details == {"provider": "resend"}

    async def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with pytest.raises(EmailDeliveryError):
            await resend_service(handler).send_email("asha@example.com", "Hi", "<p>Hi</p>")

    async def test_not_configured(self):
        service = EmailService(provider="resend")
        service.resend_api_key = ""

        with pytest.raises(EmailDeliveryError):
            await service.send_email("asha@example.com", "Hi", "<p>Hi</p>")


class TestSmtp:

    def smtp_service(self) -> EmailService:
        service = EmailService(provider="smtp")
        service.smtp_user = "mailer"
        service.smtp_password = "secret"
        return service

    async def test_sends_multipart_message(self):
        service = self.smtp_service()

        with patch("kharcha.services.email_service.aiosmtplib.send", new=AsyncMock()) as send:
            await service.send_email("asha@example.com", "Hi", "<p>Hi</p>", "Hi")

        message = send.await_args.args[0]
        assert message["To"] == "asha@example.com"
        assert [part.get_content_type() for part in message.get_payload()] == ["text/plain", "text/html"]
        assert send.await_args.kwargs["username"] == "mailer"

    async def test_smtp_failure(self):
        service = self.smtp_service()
        failing = AsyncMock(side_effect=aiosmtplib.SMTPException("auth failed"))

        with patch("kharcha.services.email_service.aiosmtplib.send", new=failing):
            with pytest.raises(EmailDeliveryError):
                await service.send_email("asha@example.com", "Hi", "<p>Hi</p>")
