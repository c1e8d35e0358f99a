"""
Unit Tests for Security Module
Tests for: session tokens, sign-in link tokens
"""
import pytest
from datetime import timedelta
from jose import jwt

from kharcha.core.config import settings
from kharcha.core.exceptions import InvalidTokenError, TokenExpiredError
from kharcha.core.security import (
    create_access_token,
    decode_token,
    generate_sign_in_token,
    hash_sign_in_token,
    verify_sign_in_token,
)


class TestSessionTokens:
    """Test JWT session tokens"""

    def test_create_access_token(self):
        """Test creating an access token"""
        token = create_access_token({"sub": "user-123", "email": "asha@example.com"})

        assert isinstance(token, str)
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == "user-123"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_decode_valid_token(self):
        token = create_access_token({"sub": "user-123"})

        payload = decode_token(token)

        assert payload["sub"] == "user-123"

    def test_decode_expired_token(self):
        """Test that an expired token raises TokenExpiredError"""
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(TokenExpiredError):
            decode_token(token)

    def test_decode_garbage_token(self):
        with pytest.raises(InvalidTokenError):
            decode_token("not-a-jwt")

    def test_decode_token_signed_with_other_key(self):
        token = jwt.encode({"sub": "user-123", "type": "access"}, "other-key", algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_decode_rejects_wrong_token_type(self):
        token = jwt.encode(
            {"sub": "user-123", "type": "refresh"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_decode_rejects_missing_subject(self):
        token = create_access_token({"email": "asha@example.com"})

        with pytest.raises(InvalidTokenError):
            decode_token(token)


class TestSignInTokens:
    """Test one-time sign-in link tokens"""

    def test_tokens_are_unique(self):
        assert generate_sign_in_token() != generate_sign_in_token()

    def test_hash_is_not_the_token(self):
        token = generate_sign_in_token()

        assert hash_sign_in_token(token) != token
        assert len(hash_sign_in_token(token)) == 64

    def test_verify_matching_token(self):
        token = generate_sign_in_token()

        assert verify_sign_in_token(token, hash_sign_in_token(token)) is True

    def test_verify_other_token(self):
        token_hash = hash_sign_in_token(generate_sign_in_token())

        assert verify_sign_in_token(generate_sign_in_token(), token_hash) is False
