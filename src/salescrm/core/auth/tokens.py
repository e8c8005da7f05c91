"""Signed session tokens.

Tokens are HMAC-signed JWTs carrying ``userId``, ``tenantId``, ``roleId``
and ``email`` plus ``iat``, ``exp`` and a unique ``jti``. Expiry is
checked against an injectable clock so the boundary can be tested.
"""

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from salescrm.core.auth.schemas import TokenClaims, TokenIdentity
from salescrm.core.constants import ACCESS_TOKEN_JTI_LENGTH, DEFAULT_TOKEN_LIFETIME_MINUTES
from salescrm.core.errors import InvalidOrExpiredToken


Clock = Callable[[], datetime]

REQUIRED_CLAIMS = ("userId", "tenantId", "email", "exp", "iat", "jti")


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class TokenService:
    """Issues and validates session tokens.

    Args:
        secret_key: Server-side HMAC secret
        algorithm: JWT algorithm; the only one accepted on validation
        lifetime: How long an issued token stays valid
        clock: Source of the current time
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(minutes=DEFAULT_TOKEN_LIFETIME_MINUTES),
        clock: Clock = utc_now,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime
        self.clock = clock

    @property
    def lifetime_seconds(self) -> int:
        """Token lifetime in whole seconds."""
        return int(self.lifetime.total_seconds())

    def issue(self, identity: TokenIdentity) -> str:
        """Sign a new token for ``identity``.

        Args:
            identity: The user, tenant, role and email to embed

        Returns:
            Encoded JWT
        """
        now = self.clock()
        claims: dict[str, Any] = {
            "userId": str(identity.user_id),
            "tenantId": str(identity.tenant_id),
            "roleId": str(identity.role_id) if identity.role_id else None,
            "email": identity.email,
            "iat": int(now.timestamp()),
            "exp": int((now + self.lifetime).timestamp()),
            "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> TokenClaims:
        """Verify a token and return its claims.

        Args:
            token: Encoded JWT from the Authorization header

        Returns:
            The validated claim-set

        Raises:
            InvalidOrExpiredToken: On a bad signature, a foreign algorithm,
                missing or malformed claims, or ``now >= exp``
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except (JWTError, ValueError):
            raise InvalidOrExpiredToken() from None

        if not isinstance(payload, dict) or any(
            payload.get(claim) is None for claim in REQUIRED_CLAIMS
        ):
            raise InvalidOrExpiredToken()

        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
            role_id = payload.get("roleId")
            claims = TokenClaims(
                user_id=UUID(str(payload["userId"])),
                tenant_id=UUID(str(payload["tenantId"])),
                role_id=UUID(str(role_id)) if role_id else None,
                email=str(payload["email"]),
                issued_at=issued_at,
                expires_at=expires_at,
                jti=str(payload["jti"]),
            )
        except (TypeError, ValueError, OverflowError):
            raise InvalidOrExpiredToken() from None

        if self.clock() >= claims.expires_at:
            raise InvalidOrExpiredToken()

        return claims
