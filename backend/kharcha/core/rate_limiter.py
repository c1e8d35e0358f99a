"""
Rate Limiting for Kharcha
=========================
slowapi limiter keyed by signed-in user or client IP.

- Everything: RATE_LIMIT_PER_MINUTE per minute
- Sign-in link requests: SIGN_IN_RATE_LIMIT (emails cost money and can be abused)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from kharcha.core.config import settings
from kharcha.core.logging_config import logger


def get_user_identifier(request: Request) -> str:
    """
    Rate limit key: the session's user id when the auth gate resolved one,
    otherwise the client IP.
    """
    session = getattr(request.state, "session", None)
    user_id = getattr(session, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URL,
    enabled=settings.RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """JSON 429 with a Retry-After hint"""
    logger.warning(f"[RateLimit] Exceeded for {get_user_identifier(request)}: {exc.detail}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please slow down.",
            "detail": str(exc.detail),
        },
        headers={"Retry-After": "60"},
    )


def sign_in_rate_limit():
    """Rate limit for sign-in link requests"""
    return limiter.limit(settings.SIGN_IN_RATE_LIMIT, key_func=get_remote_address)
