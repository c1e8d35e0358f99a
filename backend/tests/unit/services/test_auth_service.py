"""
Unit Tests for magic-link sign-in
"""
from datetime import timedelta
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import pytest
from sqlalchemy import select

from kharcha.core.exceptions import (
    EmailDeliveryError,
    InvalidTokenError,
    TokenExpiredError,
    UnsupportedProviderError,
    ValidationError,
)
from kharcha.core.security import decode_token
from kharcha.models import OutflowType, User, VerificationToken
from kharcha.modules.auth.service import AuthService
from kharcha.utils.dates import utcnow


@pytest.fixture
def mailer():
    return AsyncMock()


@pytest.fixture
def auth_service(mailer):
    return AuthService(mailer, provider="resend", max_age_hours=24, base_url="http://kharcha.test/")


def sent_link(mailer):
    """(token, email) from the last emailed link"""
    to_email, url, max_age_hours = mailer.send_sign_in_email.call_args.args
    query = parse_qs(urlparse(url).query)
    return query["token"][0], query["email"][0]


class TestSignIn:

    async def test_sends_link_and_stores_hash(self, db_session, auth_service, mailer):
        result = await auth_service.sign_in(db_session, "resend", {"email": " Asha@Example.com "})

        assert result.signing_in is False
        to_email, url, max_age_hours = mailer.send_sign_in_email.call_args.args
        assert to_email == "asha@example.com"
        assert url.startswith("http://kharcha.test/auth/callback?")
        assert max_age_hours == 24

        token, _ = sent_link(mailer)
        record = (await db_session.execute(select(VerificationToken))).scalar_one()
        assert record.token_hash != token
        assert record.expires_at - record.created_at == timedelta(hours=24)

    async def test_second_request_reports_pending_link(self, db_session, auth_service):
        await auth_service.sign_in(db_session, "resend", {"email": "asha@example.com"})

        result = await auth_service.sign_in(db_session, "resend", {"email": "asha@example.com"})

        assert result.signing_in is True

    async def test_unsupported_provider(self, db_session, auth_service):
        with pytest.raises(UnsupportedProviderError):
            await auth_service.sign_in(db_session, "github", {"email": "asha@example.com"})

    @pytest.mark.parametrize("email", ["", "not-an-email", None])
    async def test_invalid_email(self, db_session, auth_service, email):
        with pytest.raises(ValidationError):
            await auth_service.sign_in(db_session, "resend", {"email": email})

    async def test_delivery_failure_leaves_no_token(self, db_session, auth_service, mailer):
        mailer.send_sign_in_email.side_effect = EmailDeliveryError("resend", "HTTP 500")

        with pytest.raises(EmailDeliveryError):
            await auth_service.sign_in(db_session, "resend", {"email": "asha@example.com"})

        assert (await db_session.execute(select(VerificationToken))).first() is None


class TestVerifyLink:

    async def test_creates_user_with_default_types(self, db_session, auth_service, mailer):
        await auth_service.sign_in(db_session, "resend", {"email": "new@example.com"})
        token, email = sent_link(mailer)

        user, access_token = await auth_service.verify_link(db_session, token, email)

        assert user.email == "new@example.com"
        assert user.last_login is not None
        assert decode_token(access_token)["sub"] == user.id
        types = (await db_session.execute(
            select(OutflowType).where(OutflowType.user_id == user.id)
        )).scalars().all()
        assert {t.name for t in types} >= {"Food", "Subscription", "EMI/Loan", "Money Lent"}
        assert not any(t.is_custom for t in types)

    async def test_existing_user_is_reused(self, db_session, auth_service, mailer, test_user):
        await auth_service.sign_in(db_session, "resend", {"email": test_user.email})
        token, email = sent_link(mailer)

        user, _ = await auth_service.verify_link(db_session, token, email)

        assert user.id == test_user.id
        assert len((await db_session.execute(select(User))).scalars().all()) == 1

    async def test_link_is_single_use(self, db_session, auth_service, mailer):
        await auth_service.sign_in(db_session, "resend", {"email": "asha@example.com"})
        token, email = sent_link(mailer)
        await auth_service.verify_link(db_session, token, email)

        with pytest.raises(InvalidTokenError):
            await auth_service.verify_link(db_session, token, email)

    async def test_email_must_match(self, db_session, auth_service, mailer):
        await auth_service.sign_in(db_session, "resend", {"email": "asha@example.com"})
        token, _ = sent_link(mailer)

        with pytest.raises(InvalidTokenError):
            await auth_service.verify_link(db_session, token, "mallory@example.com")

    async def test_expired_link(self, db_session, auth_service, mailer):
        await auth_service.sign_in(db_session, "resend", {"email": "asha@example.com"})
        token, email = sent_link(mailer)
        record = (await db_session.execute(select(VerificationToken))).scalar_one()
        record.expires_at = utcnow() - timedelta(minutes=1)
        await db_session.flush()

        with pytest.raises(TokenExpiredError):
            await auth_service.verify_link(db_session, token, email)

    async def test_unknown_token(self, db_session, auth_service):
        with pytest.raises(InvalidTokenError):
            await auth_service.verify_link(db_session, "bogus", "asha@example.com")
