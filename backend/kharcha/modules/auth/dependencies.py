from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.database import get_db
from kharcha.core.exceptions import AuthenticationError, PermissionDeniedError
from kharcha.models.user import User
from kharcha.modules.auth.service import AuthService
from kharcha.modules.auth.session import (
    Authenticated,
    SessionState,
    SessionTokenProvider,
    Unauthenticated,
)
from kharcha.modules.auth.sign_in import SignInFlowRegistry
from kharcha.services.email_service import EmailService


def get_session_provider(request: Request) -> SessionTokenProvider:
    return request.app.state.session_provider


def get_sign_in_registry(request: Request) -> SignInFlowRegistry:
    return request.app.state.sign_in_registry


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_session_state(
    request: Request,
    provider: SessionTokenProvider = Depends(get_session_provider),
) -> SessionState:
    """State resolved by the auth gate, or resolved now for ungated routes"""
    state = getattr(request.state, "session", None)
    if state is None:
        state = provider.resolve(request)
        request.state.session = state
    return state


async def get_current_user(
    state: SessionState = Depends(get_session_state),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user (Bearer token or session cookie)"""
    if not isinstance(state, Authenticated):
        if isinstance(state, Unauthenticated) and state.reason == "TOKEN_EXPIRED":
            raise AuthenticationError("Session has expired")
        raise AuthenticationError("Not authenticated")

    user = await db.get(User, state.user_id)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Get current admin user"""
    if not current_user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return current_user
