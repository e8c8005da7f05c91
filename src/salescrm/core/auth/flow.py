"""Per-request authentication and authorization flow.

Every protected request walks the same states:

    UNAUTHENTICATED -> TOKEN_PRESENTED -> TOKEN_VALIDATED
        -> PERMISSION_CHECKED -> AUTHORIZED

Any failed transition ends in REJECTED and raises the matching error.
The user, tenant and role are re-read from the database on every
request; only role permission sets may come from the cache.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.auth.models import RevokedToken
from salescrm.core.auth.schemas import TokenClaims
from salescrm.core.auth.tokens import TokenService
from salescrm.core.errors import (
    AuthenticationRequired,
    ForbiddenError,
    InvalidOrExpiredToken,
    SessionRejected,
)
from salescrm.core.permissions.checker import PermissionChecker
from salescrm.core.permissions.policy import Action, PermissionSet, is_allowed
from salescrm.modules.tenants.models import Tenant
from salescrm.modules.users.models import User


logger = structlog.get_logger()


class AuthStage(StrEnum):
    """States of the authentication flow."""

    UNAUTHENTICATED = "unauthenticated"
    TOKEN_PRESENTED = "token_presented"
    TOKEN_VALIDATED = "token_validated"
    PERMISSION_CHECKED = "permission_checked"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


@dataclass
class AuthContext:
    """The authenticated caller for one request.

    Attributes:
        user: The active user named by the token
        tenant: The user's active tenant
        claims: The validated claim-set
        permissions: The role's permission set, or None without a role
        stage: How far the flow has progressed
    """

    user: User
    tenant: Tenant
    claims: TokenClaims
    permissions: PermissionSet | None
    stage: AuthStage = AuthStage.TOKEN_VALIDATED
    granted: list[str] = field(default_factory=list)

    @property
    def user_id(self) -> UUID:
        return self.user.id

    @property
    def tenant_id(self) -> UUID:
        return self.tenant.id

    @property
    def role_id(self) -> UUID | None:
        return self.user.role_id

    @property
    def is_superuser(self) -> bool:
        return self.permissions is not None and self.permissions.is_superuser

    def can(self, resource: str, action: Action | str) -> bool:
        """Check a permission without changing the flow state."""
        return is_allowed(self.permissions, resource, action)

    def require(self, resource: str, action: Action | str) -> None:
        """Record a granted permission or reject the request.

        Raises:
            ForbiddenError: The role does not grant ``action`` on ``resource``
        """
        required = f"{resource}:{Action(action).value}"
        if not self.can(resource, action):
            logger.warning(
                "permission_denied",
                user_id=str(self.user_id),
                tenant_id=str(self.tenant_id),
                required_permission=required,
            )
            self.stage = AuthStage.REJECTED
            raise ForbiddenError(
                "Insufficient permissions",
                details={"required_permission": required},
            )
        self.stage = AuthStage.PERMISSION_CHECKED
        self.granted.append(required)


class AuthFlow:
    """Drives one request through the authentication states.

    Args:
        session: Database session for user, tenant and denylist lookups
        tokens: Token service used for validation
        checker: Role permission lookup
        revocation_enabled: Whether to consult the token denylist
    """

    def __init__(
        self,
        session: AsyncSession,
        tokens: TokenService,
        checker: PermissionChecker,
        revocation_enabled: bool = True,
    ) -> None:
        self.session = session
        self.tokens = tokens
        self.checker = checker
        self.revocation_enabled = revocation_enabled
        self.stage = AuthStage.UNAUTHENTICATED
        self.rejection_reason: str | None = None

    def _reject(self, reason: str, error: Exception) -> Exception:
        self.stage = AuthStage.REJECTED
        self.rejection_reason = reason
        logger.info("auth_rejected", reason=reason)
        return error

    async def authenticate(self, token: str | None) -> AuthContext:
        """Run the token and session checks.

        Args:
            token: Raw bearer token, or None when the header is absent

        Returns:
            Context for the validated caller

        Raises:
            AuthenticationRequired: No token was presented
            InvalidOrExpiredToken: Signature, claims, expiry, or revocation failed
            SessionRejected: The user or tenant is inactive, or they disagree
        """
        if not token:
            raise self._reject("missing_token", AuthenticationRequired())
        self.stage = AuthStage.TOKEN_PRESENTED

        try:
            claims = self.tokens.validate(token)
        except InvalidOrExpiredToken as e:
            raise self._reject("invalid_token", e) from None

        if self.revocation_enabled and await self._is_revoked(claims.jti):
            raise self._reject("token_revoked", InvalidOrExpiredToken())

        user = await self.session.get(User, claims.user_id)
        if user is None or not user.is_active or user.tenant_id != claims.tenant_id:
            raise self._reject("user_inactive_or_tenant_mismatch", SessionRejected())

        tenant = await self.session.get(Tenant, claims.tenant_id)
        if tenant is None or not tenant.is_active:
            raise self._reject("tenant_inactive", SessionRejected())

        permissions = await self.checker.get_permissions(user.role_id, tenant.id)

        self.stage = AuthStage.TOKEN_VALIDATED
        return AuthContext(
            user=user,
            tenant=tenant,
            claims=claims,
            permissions=permissions,
            stage=self.stage,
        )

    def authorize(
        self,
        context: AuthContext,
        resource: str,
        action: Action | str,
    ) -> AuthContext:
        """Check one permission and advance the context to AUTHORIZED.

        Raises:
            ForbiddenError: The role does not grant ``action`` on ``resource``
        """
        try:
            context.require(resource, action)
        except ForbiddenError:
            self.stage = AuthStage.REJECTED
            self.rejection_reason = "permission_denied"
            raise
        context.stage = AuthStage.AUTHORIZED
        self.stage = AuthStage.AUTHORIZED
        return context

    async def _is_revoked(self, jti: str) -> bool:
        stmt = select(RevokedToken.id).where(RevokedToken.jti == jti)
        result = await self.session.execute(stmt)
        return result.first() is not None
