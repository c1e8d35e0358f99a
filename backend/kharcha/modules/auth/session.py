"""
Session state
=============
The session token provider owns the current session state. Consumers only
read it; it changes when the provider starts (app mount), on every request
(auth state change) and when the session cookie is cleared (sign-out).

Exactly one of the three variants holds at a time:

    Loading          provider not started yet, auth is indeterminate
    Unauthenticated  no token, or the token is invalid or expired
    Authenticated    valid session token (carries user id and email)
"""
from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Request, Response

from kharcha.core.config import settings
from kharcha.core.exceptions import AuthenticationError
from kharcha.core.logging_config import logger, set_user_id
from kharcha.core.security import decode_token


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Unauthenticated:
    reason: Optional[str] = None


@dataclass(frozen=True)
class Authenticated:
    token: str
    user_id: str
    email: Optional[str] = None


SessionState = Union[Loading, Unauthenticated, Authenticated]


def session_status(state: SessionState) -> str:
    if isinstance(state, Authenticated):
        return "authenticated"
    if isinstance(state, Unauthenticated):
        return "unauthenticated"
    return "loading"


def token_from_request(request: Request, cookie_name: str) -> Optional[str]:
    """Bearer header wins over the session cookie"""
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(cookie_name) or None


class SessionTokenProvider:
    """Resolves the session state of a request from its token"""

    def __init__(self, cookie_name: Optional[str] = None):
        self.cookie_name = cookie_name or settings.SESSION_COOKIE_NAME
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        self._started = True
        logger.info("Session token provider started")

    def stop(self) -> None:
        self._started = False

    def resolve(self, request: Request) -> SessionState:
        if not self._started:
            return Loading()

        token = token_from_request(request, self.cookie_name)
        if not token:
            return Unauthenticated()

        try:
            payload = decode_token(token)
        except AuthenticationError as e:
            return Unauthenticated(reason=e.code)

        set_user_id(payload["sub"])
        return Authenticated(token=token, user_id=payload["sub"], email=payload.get("email"))

    def set_session_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            httponly=True,
            secure=settings.SESSION_COOKIE_SECURE,
            samesite="lax",
        )

    def clear_session_cookie(self, response: Response) -> None:
        response.delete_cookie(key=self.cookie_name, httponly=True, samesite="lax")
