"""
Email Service for Kharcha
=========================
Sends the sign-in link email.

Supports the Resend HTTP API (default) and SMTP.
"""

import aiosmtplib
import httpx
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
from urllib.parse import urlparse
from jinja2 import Environment, FileSystemLoader, select_autoescape

from kharcha.core.config import settings
from kharcha.core.exceptions import EmailDeliveryError
from kharcha.core.logging_config import logger


class EmailService:
    """Async email service using Resend or SMTP"""

    def __init__(self, provider: Optional[str] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.provider = (provider or settings.EMAIL_PROVIDER).lower()
        self.resend_api_key = settings.RESEND_API_KEY
        self.resend_api_url = settings.RESEND_API_URL
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME
        self._http_client = http_client
        self._templates = Environment(
            loader=FileSystemLoader(str(settings.TEMPLATES_DIR / "emails")),
            autoescape=select_autoescape(["html"]),
        )

        logger.info(f"[Email] Using {self.provider} for email delivery")

    @property
    def is_configured(self) -> bool:
        """Check if email service is properly configured"""
        if self.provider == "resend":
            return bool(self.resend_api_key)
        return bool(self.smtp_user and self.smtp_password)

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> None:
        """
        Send an email asynchronously.

        Raises EmailDeliveryError when the provider rejects the message.
        """
        if not self.is_configured:
            raise EmailDeliveryError(self.provider, "email service not configured")

        if self.provider == "resend":
            await self._send_via_resend(to_email, subject, html_content, text_content)
        else:
            await self._send_via_smtp(to_email, subject, html_content, text_content)

    async def _send_via_resend(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> None:
        """Send email via the Resend HTTP API"""
        payload = {
            "from": f"{self.from_name} <{self.from_email}>",
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }
        if text_content:
            payload["text"] = text_content

        headers = {"Authorization": f"Bearer {self.resend_api_key}"}
        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.resend_api_url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
                    response = await client.post(self.resend_api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"[Email/Resend] Request failed for {to_email}: {e}")
            raise EmailDeliveryError("resend", str(e))

        if response.status_code >= 400:
            logger.error(f"[Email/Resend] Failed with status {response.status_code}: {response.text}")
            raise EmailDeliveryError("resend", f"HTTP {response.status_code}")

        logger.info(f"[Email/Resend] Successfully sent email to {to_email}: {subject}")

    async def _send_via_smtp(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> None:
        """Send email via SMTP"""
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject

        # Plain text first so clients prefer the HTML part
        if text_content:
            message.attach(MIMEText(text_content, "plain"))
        message.attach(MIMEText(html_content, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True
            )
        except aiosmtplib.SMTPException as e:
            logger.error(f"[Email/SMTP] Failed to send email to {to_email}: {e}")
            raise EmailDeliveryError("smtp", str(e))

        logger.info(f"[Email/SMTP] Successfully sent email to {to_email}: {subject}")

    def render_sign_in_email(self, url: str, max_age_hours: int) -> tuple:
        """Render (subject, html, text) for a sign-in link"""
        host = urlparse(url).netloc
        context = {"url": url, "host": host, "max_age_hours": max_age_hours}
        subject = f"Sign in to {host}"
        html = self._templates.get_template("sign_in.html").render(**context)
        text = self._templates.get_template("sign_in.txt").render(**context)
        return subject, html, text

    async def send_sign_in_email(self, to_email: str, url: str, max_age_hours: int = 24) -> None:
        """Send the magic sign-in link"""
        subject, html, text = self.render_sign_in_email(url, max_age_hours)
        await self.send_email(to_email, subject, html, text)
