"""Authentication API routes.

Provides endpoints for:
- Tenant registration
- Login/logout
- The current user's profile
"""

from fastapi import APIRouter, status

from salescrm.api.dependencies import DBSession
from salescrm.core.auth.dependencies import ClientInfo, CurrentAuth, Recorder, Tokens
from salescrm.core.auth.schemas import (
    LoginRequest,
    RegisterRequest,
    SessionUser,
    TokenResponse,
)
from salescrm.core.auth.service import AuthService


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new tenant",
    description=(
        "Creates a tenant with the default roles and sales stages, and a "
        "Super Admin user who is signed in straight away."
    ),
)
async def register(
    data: RegisterRequest,
    db: DBSession,
    tokens: Tokens,
    recorder: Recorder,
    info: ClientInfo,
) -> TokenResponse:
    """Register a new tenant and its first user."""
    return await AuthService(db, tokens, recorder, info).register(data)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="Authenticate with email and password to receive a session token.",
)
async def login(
    data: LoginRequest,
    db: DBSession,
    tokens: Tokens,
    recorder: Recorder,
    info: ClientInfo,
) -> TokenResponse:
    """Login with email and password."""
    service = AuthService(db, tokens, recorder, info)
    return await service.login(data.email, data.password, data.tenant_slug)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Revoke the presented session token.",
)
async def logout(
    auth: CurrentAuth,
    db: DBSession,
    tokens: Tokens,
    recorder: Recorder,
    info: ClientInfo,
) -> None:
    """Logout by revoking the session token."""
    await AuthService(db, tokens, recorder, info).logout(auth)


@router.get(
    "/me",
    response_model=SessionUser,
    summary="Get current user",
    description="Returns the authenticated user with their role and permissions.",
)
async def me(
    auth: CurrentAuth,
    db: DBSession,
    tokens: Tokens,
    recorder: Recorder,
) -> SessionUser:
    """Get current user profile."""
    return await AuthService(db, tokens, recorder).profile(auth.user, auth.permissions)
