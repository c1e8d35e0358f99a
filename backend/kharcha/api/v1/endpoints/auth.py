from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.database import get_db
from kharcha.core.rate_limiter import sign_in_rate_limit
from kharcha.modules.auth.dependencies import (
    get_auth_service,
    get_session_provider,
    get_session_state,
)
from kharcha.modules.auth.service import AuthService
from kharcha.modules.auth.session import Authenticated, SessionState, SessionTokenProvider, session_status
from kharcha.modules.auth.sign_in import SIGN_IN_PROVIDER, SUCCESS_MESSAGE
from kharcha.schemas.auth import SessionResponse, SignInRequest, SignInResponse, TokenResponse

router = APIRouter()


@router.post("/signin", response_model=SignInResponse)
@sign_in_rate_limit()
async def request_sign_in_link(
    request: Request,
    data: SignInRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Email a one-time sign-in link.

    Delivery failures surface as 502 here; the HTML form turns them into a
    friendly message instead.
    """
    result = await auth_service.sign_in(db, SIGN_IN_PROVIDER, {"email": data.email})
    return SignInResponse(message=SUCCESS_MESSAGE, signing_in=result.signing_in)


@router.get("/verify", response_model=TokenResponse)
async def verify_sign_in_link(
    token: str,
    email: str,
    response: Response,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    provider: SessionTokenProvider = Depends(get_session_provider),
):
    """Redeem a sign-in link for a session token (also set as the session cookie)"""
    _, access_token = await auth_service.verify_link(db, token, email)
    provider.set_session_cookie(response, access_token)
    return TokenResponse(access_token=access_token)


@router.get("/session", response_model=SessionResponse)
async def get_session(state: SessionState = Depends(get_session_state)):
    """Current session state: loading, unauthenticated or authenticated"""
    if isinstance(state, Authenticated):
        return SessionResponse(status=session_status(state), user_id=state.user_id, email=state.email)
    return SessionResponse(status=session_status(state))


@router.post("/signout")
async def sign_out(response: Response, provider: SessionTokenProvider = Depends(get_session_provider)):
    provider.clear_session_cookie(response)
    return {"message": "Signed out"}
