"""User management API routes.

Sign-in lives under ``/auth``; these endpoints let administrators manage
the users of their own tenant.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from salescrm.api.dependencies import DBSession
from salescrm.core.auth.dependencies import ClientInfo, Recorder, require_permission
from salescrm.core.auth.flow import AuthContext
from salescrm.core.database.pagination import PageResponse
from salescrm.core.permissions.policy import Action, Resource
from salescrm.core.resources.router import Pagination
from salescrm.modules.users.schemas import UserCreate, UserResponse, UserUpdate
from salescrm.modules.users.services import UserService


router = APIRouter(prefix="/users", tags=["users"])

CanRead = Annotated[AuthContext, Depends(require_permission(Resource.USERS, Action.READ))]
CanWrite = Annotated[AuthContext, Depends(require_permission(Resource.USERS, Action.WRITE))]
CanDelete = Annotated[
    AuthContext, Depends(require_permission(Resource.USERS, Action.DELETE))
]


@router.get(
    "",
    response_model=PageResponse[UserResponse],
    summary="List users",
    description="List users in the current tenant, including deactivated ones.",
)
async def list_users(
    auth: CanRead,
    db: DBSession,
    recorder: Recorder,
    params: Pagination,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> PageResponse[UserResponse]:
    """List users in tenant."""
    page = await UserService(db, auth, recorder).list_users(params, search)
    return PageResponse[UserResponse](
        data=[UserResponse.model_validate(u) for u in page.items],
        meta=page.meta,
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    data: UserCreate,
    auth: CanWrite,
    db: DBSession,
    recorder: Recorder,
    info: ClientInfo,
) -> UserResponse:
    """Create a user in the caller's tenant."""
    user = await UserService(db, auth, recorder, info).create_user(data)
    return UserResponse.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID",
)
async def get_user(
    user_id: UUID,
    auth: CanRead,
    db: DBSession,
    recorder: Recorder,
) -> UserResponse:
    """Get user by ID."""
    user = await UserService(db, auth, recorder).get_user(user_id)
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="Update a user's profile, role, or active flag.",
)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    auth: CanWrite,
    db: DBSession,
    recorder: Recorder,
    info: ClientInfo,
) -> UserResponse:
    """Update user by ID."""
    user = await UserService(db, auth, recorder, info).update_user(user_id, data)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate user",
    description="Users are never removed; they are deactivated and can no longer sign in.",
)
async def deactivate_user(
    user_id: UUID,
    auth: CanDelete,
    db: DBSession,
    recorder: Recorder,
    info: ClientInfo,
) -> None:
    """Deactivate a user."""
    await UserService(db, auth, recorder, info).deactivate_user(user_id)
