"""
Auth API Routes

Sign-in, sign-out, self-service sign-up and the current identity.
"""

from fastapi import APIRouter, Depends, Header, status
from pydantic import BaseModel

from ...store.identity import IdentityProvider, SessionContext
from ..auth import bearer_token, get_current_context
from ..database import get_identity_provider

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


class IdentityResponse(BaseModel):
    """The signed-in user."""

    user_id: str
    email: str
    role: str
    capabilities: list[str]


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: IdentityResponse


def identity_response(ctx: SessionContext) -> IdentityResponse:
    identity = ctx.require_identity()
    return IdentityResponse(
        user_id=identity.user_id,
        email=identity.email,
        role=identity.role.value,
        capabilities=sorted(c.value for c in ctx.capabilities),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """Sign in with email and password."""
    session = provider.sign_in(body.email, body.password)
    ctx = provider.context(session.access_token)
    return LoginResponse(access_token=session.access_token, user=identity_response(ctx))


@router.post("/logout")
async def logout(
    authorization: str | None = Header(None),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> dict:
    token = bearer_token(authorization)
    if token:
        provider.sign_out(token)
    return {"message": "Signed out"}


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    body: LoginRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> dict:
    """Self-service account creation with role 'user'."""
    identity = provider.sign_up(body.email, body.password)
    return {"message": "User created successfully", "user_id": identity.user_id}


@router.get("/me", response_model=IdentityResponse)
async def me(ctx: SessionContext = Depends(get_current_context)) -> IdentityResponse:
    return identity_response(ctx)
