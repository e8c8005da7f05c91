"""Authentication schemas: token claims and the auth endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from salescrm.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_SLUG_LENGTH,
    MIN_PASSWORD_LENGTH,
    TOKEN_TYPE,
)
from salescrm.core.resources.schemas import APIModel
from salescrm.modules.users.schemas import validate_password_complexity


class TokenIdentity(BaseModel):
    """Identity fields embedded in a session token.

    Attributes:
        user_id: The user's UUID
        tenant_id: The tenant's UUID
        role_id: The user's role, if any
        email: The user's email
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    tenant_id: UUID
    role_id: UUID | None = None
    email: str


class TokenClaims(TokenIdentity):
    """A validated claim-set.

    Attributes:
        issued_at: When the token was issued
        expires_at: When the token stops being accepted
        jti: Unique token id, used for revocation
    """

    issued_at: datetime
    expires_at: datetime
    jti: str

    @property
    def identity(self) -> TokenIdentity:
        """The identity portion of the claims."""
        return TokenIdentity(
            user_id=self.user_id,
            tenant_id=self.tenant_id,
            role_id=self.role_id,
            email=self.email,
        )


# ============================================================
# Request / Response Schemas
# ============================================================


class LoginRequest(APIModel):
    """Schema for email/password login.

    An email can exist in several tenants; ``tenantSlug`` picks one.
    Without it the first active account whose password matches wins.
    """

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)
    tenant_slug: str | None = Field(None, max_length=MAX_SLUG_LENGTH)


class RegisterRequest(APIModel):
    """Schema for onboarding a new tenant and its first administrator."""

    tenant_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    domain: str | None = Field(None, min_length=3, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    first_name: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    last_name: str | None = Field(None, max_length=MAX_NAME_LENGTH)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class SessionUser(APIModel):
    """The signed-in user as returned by login and ``/auth/me``."""

    id: UUID
    email: str
    first_name: str | None
    last_name: str | None
    tenant_id: UUID
    role: str | None
    permissions: dict[str, list[str]]


class TokenResponse(APIModel):
    """Schema for authentication token response."""

    access_token: str
    token_type: str = TOKEN_TYPE
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: SessionUser
