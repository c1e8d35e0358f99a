from datetime import timedelta
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
import hashlib
import hmac
import secrets

from kharcha.core.config import settings
from kharcha.core.exceptions import InvalidTokenError, TokenExpiredError
from kharcha.utils.dates import utcnow


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT session token"""
    to_encode = data.copy()

    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT session token.

    Raises TokenExpiredError or InvalidTokenError.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError("Could not validate credentials")

    if payload.get("type") != "access":
        raise InvalidTokenError("Invalid token type")
    if not payload.get("sub"):
        raise InvalidTokenError("Invalid token payload")

    return payload


def generate_sign_in_token() -> str:
    """Generate the one-time secret carried by an emailed sign-in link"""
    return secrets.token_urlsafe(32)


def hash_sign_in_token(token: str) -> str:
    """Hash a sign-in token for storage (only the hash is persisted)"""
    return hashlib.sha256(f"{token}{settings.SECRET_KEY}".encode()).hexdigest()


def verify_sign_in_token(token: str, token_hash: str) -> bool:
    """Constant-time comparison of a sign-in token against its stored hash"""
    return hmac.compare_digest(hash_sign_in_token(token), token_hash)
