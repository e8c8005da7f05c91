"""Authentication service for login, registration, and logout."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.audit.models import AuditAction
from salescrm.core.audit.recorder import AuditEntry, AuditRecorder
from salescrm.core.auth.backend import pwd_context, verify_password
from salescrm.core.auth.dependencies import RequestInfo
from salescrm.core.auth.flow import AuthContext
from salescrm.core.auth.models import RevokedToken
from salescrm.core.auth.schemas import (
    RegisterRequest,
    SessionUser,
    TokenIdentity,
    TokenResponse,
)
from salescrm.core.auth.tokens import TokenService
from salescrm.core.errors import InvalidCredentials
from salescrm.core.permissions.checker import PermissionChecker
from salescrm.core.permissions.policy import PermissionSet, Resource
from salescrm.modules.tenants.models import Tenant
from salescrm.modules.tenants.services import TenantService
from salescrm.modules.users.models import User


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations.

    Login and registration run before a caller is authenticated, so they
    query users across tenants; everything they return is bound to the
    single tenant of the matched user.
    """

    def __init__(
        self,
        db: AsyncSession,
        tokens: TokenService,
        recorder: AuditRecorder,
        request_info: RequestInfo | None = None,
    ) -> None:
        self.db = db
        self.tokens = tokens
        self.recorder = recorder
        self.request_info = request_info
        self.checker = PermissionChecker(db)

    async def login(
        self, email: str, password: str, tenant_slug: str | None = None
    ) -> TokenResponse:
        """Authenticate with email and password.

        Only active users of active tenants are considered. The password
        is always run through bcrypt, even without a candidate user, so
        timing does not reveal whether the email exists.

        Args:
            email: Sign-in email, matched case-insensitively
            password: Plain text password
            tenant_slug: Optional tenant to sign in to

        Returns:
            The session token and the signed-in user

        Raises:
            InvalidCredentials: If no active account matches
        """
        stmt = (
            select(User)
            .join(Tenant, Tenant.id == User.tenant_id)
            .where(
                func.lower(User.email) == email.lower(),
                User.is_active.is_(True),
                Tenant.is_active.is_(True),
            )
            .order_by(User.created_at, User.id)
        )
        if tenant_slug:
            stmt = stmt.where(Tenant.slug == tenant_slug)
        candidates = list((await self.db.execute(stmt)).scalars().all())

        if not candidates:
            pwd_context.dummy_verify()
        user = next(
            (u for u in candidates if verify_password(password, u.password_hash)),
            None,
        )

        if user is None:
            logger.warning("login_failed", candidates=len(candidates))
            self._audit(
                AuditAction.LOGIN_FAILED,
                tenant_id=candidates[0].tenant_id if len(candidates) == 1 else None,
                actor_id=None,
                details={"email": email.lower()},
            )
            raise InvalidCredentials()

        user.last_login = datetime.now(UTC)
        await self.db.flush()
        await self.db.refresh(user)
        await self.db.commit()

        logger.info("login_succeeded", user_id=str(user.id), tenant_id=str(user.tenant_id))
        self._audit(AuditAction.LOGIN_SUCCESS, tenant_id=user.tenant_id, actor_id=user.id)
        return await self._session_for(user)

    async def register(self, data: RegisterRequest) -> TokenResponse:
        """Onboard a tenant and sign its first administrator in.

        Raises:
            ConflictError: If the domain is already registered
        """
        onboarding = await TenantService(self.db).onboard(
            name=data.tenant_name,
            domain=data.domain,
            admin_email=data.email,
            admin_password=data.password,
            admin_first_name=data.first_name,
            admin_last_name=data.last_name,
        )
        await self.db.commit()

        admin = onboarding.admin
        self.recorder.record(
            AuditEntry(
                tenant_id=onboarding.tenant.id,
                actor_id=admin.id,
                action=AuditAction.CREATE,
                resource_type="tenants",
                resource_id=str(onboarding.tenant.id),
                after={"name": onboarding.tenant.name, "slug": onboarding.tenant.slug},
                **self._client_fields(),
            )
        )
        return await self._session_for(admin)

    async def logout(self, context: AuthContext) -> None:
        """Revoke the presented token until it would have expired anyway."""
        claims = context.claims
        self.db.add(
            RevokedToken(
                jti=claims.jti,
                user_id=claims.user_id,
                tenant_id=claims.tenant_id,
                expires_at=claims.expires_at,
            )
        )
        await self.db.flush()
        pruned = await self.prune_revoked_tokens()
        await self.db.commit()

        logger.info("logout", user_id=str(context.user_id), revoked_tokens_pruned=pruned)
        self._audit(AuditAction.LOGOUT, tenant_id=context.tenant_id, actor_id=context.user_id)

    async def prune_revoked_tokens(self, now: datetime | None = None) -> int:
        """Delete denylist rows for tokens that have expired on their own.

        Expired tokens fail validation regardless, so their rows are dead
        weight. Runs inside the caller's transaction.

        Returns:
            Number of rows deleted
        """
        result = await self.db.execute(
            delete(RevokedToken).where(RevokedToken.expires_at < (now or datetime.now(UTC)))
        )
        return result.rowcount

    async def profile(self, user: User, permissions: PermissionSet | None = None) -> SessionUser:
        """Describe a user with their role name and permission table."""
        role = (
            await self.checker.get_role(user.role_id, user.tenant_id)
            if user.role_id
            else None
        )
        if permissions is None and role is not None:
            permissions = await self.checker.get_permissions(role.id, user.tenant_id)
        return SessionUser(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            tenant_id=user.tenant_id,
            role=role.name if role else None,
            permissions=permissions.to_mapping() if permissions else {},
        )

    async def _session_for(self, user: User) -> TokenResponse:
        token = self.tokens.issue(
            TokenIdentity(
                user_id=user.id,
                tenant_id=user.tenant_id,
                role_id=user.role_id,
                email=user.email,
            )
        )
        return TokenResponse(
            access_token=token,
            expires_in=self.tokens.lifetime_seconds,
            user=await self.profile(user),
        )

    def _client_fields(self) -> dict[str, str | None]:
        info = self.request_info
        return {
            "ip_address": info.ip_address if info else None,
            "user_agent": info.user_agent if info else None,
            "request_id": info.request_id if info else None,
        }

    def _audit(
        self,
        action: AuditAction,
        *,
        tenant_id: UUID | None,
        actor_id: UUID | None,
        details: dict[str, str] | None = None,
    ) -> None:
        self.recorder.record(
            AuditEntry(
                tenant_id=tenant_id,
                actor_id=actor_id,
                action=action,
                resource_type=Resource.USERS.value,
                resource_id=str(actor_id) if actor_id else None,
                after=details,
                **self._client_fields(),
            )
        )
