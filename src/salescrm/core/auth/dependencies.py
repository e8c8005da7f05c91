"""FastAPI dependencies for authentication and authorization.

Protected routes declare ``require_permission(resource, action)``; the
dependency runs the full auth flow before the handler body executes, so
no tenant data is touched for rejected requests.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from salescrm.api.dependencies import DBSession
from salescrm.core.audit.recorder import AuditRecorder
from salescrm.core.auth.flow import AuthContext, AuthFlow
from salescrm.core.auth.tokens import TokenService
from salescrm.core.logging.middleware import get_client_ip
from salescrm.core.permissions.cache import PermissionCache
from salescrm.core.permissions.checker import PermissionChecker
from salescrm.core.permissions.policy import Action


# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """Return the application's token service."""
    return request.app.state.token_service


def get_audit_recorder(request: Request) -> AuditRecorder:
    """Return the application's audit recorder."""
    return request.app.state.audit_recorder


def get_permission_cache(request: Request) -> PermissionCache | None:
    """Return the role permission cache, if Redis is configured."""
    return getattr(request.app.state, "permission_cache", None)


Tokens = Annotated[TokenService, Depends(get_token_service)]
Recorder = Annotated[AuditRecorder, Depends(get_audit_recorder)]
PermCache = Annotated[PermissionCache | None, Depends(get_permission_cache)]


@dataclass(frozen=True)
class RequestInfo:
    """Client details attached to audit entries."""

    ip_address: str | None
    user_agent: str | None
    request_id: str | None


def get_request_info(request: Request) -> RequestInfo:
    """Extract client info from the request."""
    return RequestInfo(
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
        request_id=getattr(request.state, "request_id", None),
    )


ClientInfo = Annotated[RequestInfo, Depends(get_request_info)]


async def get_auth_flow(
    request: Request,
    db: DBSession,
    tokens: Tokens,
    cache: PermCache,
) -> AuthFlow:
    """Build the auth flow for this request."""
    return AuthFlow(
        db,
        tokens,
        PermissionChecker(db, cache),
        revocation_enabled=request.app.state.settings.token_revocation_enabled,
    )


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    flow: Annotated[AuthFlow, Depends(get_auth_flow)],
    request: Request,
) -> AuthContext:
    """Authenticate the caller from the Authorization header.

    Raises:
        AuthenticationRequired: If the header is missing
        InvalidOrExpiredToken: If the token fails validation
        SessionRejected: If the user or tenant can no longer act
    """
    token = credentials.credentials if credentials else None
    context = await flow.authenticate(token)
    request.state.user_id = context.user_id
    request.state.tenant_id = context.tenant_id
    return context


CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]


def require_permission(
    resource: str, action: Action | str
) -> Callable[..., Awaitable[AuthContext]]:
    """Build a dependency that authenticates and checks one permission.

    Usage:
        @router.delete("/{account_id}")
        async def delete_account(
            auth: Annotated[AuthContext, Depends(require_permission("accounts", "delete"))],
        ):
            ...

    Args:
        resource: The resource being accessed (e.g., "accounts")
        action: The action being performed (e.g., "delete")

    Returns:
        Dependency returning the authorized AuthContext
    """
    required_action = Action(action)

    async def dependency(
        context: CurrentAuth,
        flow: Annotated[AuthFlow, Depends(get_auth_flow)],
    ) -> AuthContext:
        return flow.authorize(context, resource, required_action)

    dependency.__name__ = f"require_{resource}_{required_action.name.lower()}"
    return dependency
