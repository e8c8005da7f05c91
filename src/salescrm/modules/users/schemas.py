"""Pydantic schemas for user management."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from salescrm.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_PHONE_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from salescrm.core.resources.schemas import APIModel


# ============================================================
# Password Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"[A-Z]", "uppercase letter"),
    (r"[a-z]", "lowercase letter"),
    (r"\d", "digit"),
    (r"[^A-Za-z0-9\s]", "special character"),
]


def validate_password_complexity(password: str) -> str:
    """Validate password meets complexity requirements.

    Requirements:
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character, such as ! or #

    Args:
        password: The password to validate

    Returns:
        The validated password

    Raises:
        ValueError: If password doesn't meet requirements
    """
    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


Password = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)


# ============================================================
# User Schemas
# ============================================================


class UserProfile(APIModel):
    """Editable profile fields."""

    first_name: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    last_name: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    phone: str | None = Field(None, max_length=MAX_PHONE_LENGTH)
    timezone: str | None = Field(None, max_length=50)


class UserCreate(UserProfile):
    """Schema for an admin creating a user in their tenant."""

    email: EmailStr
    password: str = Password
    role_id: UUID | None = None

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class UserUpdate(UserProfile):
    """Schema for an admin updating a user.

    Setting ``isActive`` back to true reactivates a deactivated user.
    """

    email: EmailStr | None = None
    role_id: UUID | None = None
    is_active: bool | None = None


class UserResponse(APIModel):
    """Schema for user response data."""

    id: UUID
    tenant_id: UUID
    email: str
    first_name: str | None
    last_name: str | None
    role_id: UUID | None
    phone: str | None
    timezone: str
    is_active: bool
    last_login: datetime | None
    created_at: datetime
    updated_at: datetime
