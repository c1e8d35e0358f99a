from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class SignInRequest(BaseModel):
    """Email submitted on the sign-in form; consumed by one sign-in call"""
    email: EmailStr


class SignInResponse(BaseModel):
    message: str
    signing_in: bool = False


class SessionResponse(BaseModel):
    """Current session as seen by the server"""
    status: str = Field(..., description="loading, unauthenticated or authenticated")
    user_id: Optional[str] = None
    email: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
