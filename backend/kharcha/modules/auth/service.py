"""
Auth service: magic-link sign-in.

`sign_in` issues a one-time link and emails it; `verify_link` redeems it and
returns a session token. Only the hash of a link token is stored.
"""
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.config import settings
from kharcha.core.exceptions import (
    InvalidTokenError,
    TokenExpiredError,
    UnsupportedProviderError,
    ValidationError,
)
from kharcha.core.logging_config import logger
from kharcha.core.security import (
    create_access_token,
    generate_sign_in_token,
    hash_sign_in_token,
)
from kharcha.models.user import User
from kharcha.models.verification_token import VerificationToken
from kharcha.modules.auth.sign_in import SignInResult
from kharcha.services.email_service import EmailService
from kharcha.services.user_service import user_service
from kharcha.utils.dates import utcnow


class AuthService:

    def __init__(
        self,
        email_service: EmailService,
        provider: Optional[str] = None,
        max_age_hours: Optional[int] = None,
        base_url: Optional[str] = None,
    ):
        self.email_service = email_service
        self.provider = provider or settings.SIGN_IN_PROVIDER
        self.max_age_hours = max_age_hours or settings.SIGN_IN_LINK_MAX_AGE_HOURS
        self.base_url = (base_url or settings.FRONTEND_URL).rstrip("/")

    def callback_url(self, token: str, email: str) -> str:
        return f"{self.base_url}/auth/callback?{urlencode({'token': token, 'email': email})}"

    async def sign_in(self, db: AsyncSession, provider: str, form_data: Dict[str, Any]) -> SignInResult:
        """
        Email a sign-in link to `form_data["email"]`.

        Returns `signing_in=True` when an earlier link for the address is still
        valid; a fresh link is sent either way. Raises EmailDeliveryError when
        the email cannot be sent.
        """
        if provider != self.provider:
            raise UnsupportedProviderError(provider)

        email = str(form_data.get("email") or "").strip().lower()
        if not email or "@" not in email:
            raise ValidationError("A valid email address is required", field="email")

        now = utcnow()
        pending = await db.scalar(
            select(VerificationToken.id).where(
                VerificationToken.email == email,
                VerificationToken.consumed_at.is_(None),
                VerificationToken.expires_at > now,
            ).limit(1)
        )

        token = generate_sign_in_token()
        db.add(VerificationToken(
            email=email,
            token_hash=hash_sign_in_token(token),
            created_at=now,
            expires_at=now + timedelta(hours=self.max_age_hours),
        ))
        await db.flush()

        try:
            await self.email_service.send_sign_in_email(email, self.callback_url(token, email), self.max_age_hours)
        except Exception:
            await db.rollback()
            logger.log_auth_event("sign_in_link_failed", success=False, user_email=email)
            raise
        await db.commit()

        logger.log_auth_event("sign_in_link_sent", success=True, user_email=email)
        return SignInResult(signing_in=pending is not None)

    async def verify_link(self, db: AsyncSession, token: str, email: str) -> Tuple[User, str]:
        """Redeem a sign-in link. Returns the (possibly new) user and a session token."""
        email = (email or "").strip().lower()
        result = await db.execute(
            select(VerificationToken).where(VerificationToken.token_hash == hash_sign_in_token(token or ""))
        )
        record = result.scalar_one_or_none()

        if record is None or record.email != email or record.consumed_at is not None:
            logger.log_auth_event("sign_in_link_rejected", success=False, user_email=email)
            raise InvalidTokenError("Invalid or already used sign-in link")

        now = utcnow()
        if record.expires_at <= now:
            logger.log_auth_event("sign_in_link_expired", success=False, user_email=email)
            raise TokenExpiredError("Sign-in link has expired")

        record.consumed_at = now
        user = await user_service.get_or_create(db, email)
        await db.commit()

        access_token = create_access_token({"sub": str(user.id), "email": user.email})
        logger.log_auth_event("sign_in", success=True, user_email=email)
        return user, access_token
