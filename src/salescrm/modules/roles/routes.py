"""Role API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from salescrm.api.dependencies import DBSession
from salescrm.core.auth.dependencies import (
    ClientInfo,
    PermCache,
    Recorder,
    require_permission,
)
from salescrm.core.auth.flow import AuthContext
from salescrm.core.permissions.policy import Action, Resource
from salescrm.modules.roles.schemas import RoleResponse, RoleUpdate
from salescrm.modules.roles.services import RoleService


router = APIRouter(prefix="/roles", tags=["roles"])

CanRead = Annotated[AuthContext, Depends(require_permission(Resource.ROLES, Action.READ))]
CanWrite = Annotated[AuthContext, Depends(require_permission(Resource.ROLES, Action.WRITE))]


@router.get("", response_model=list[RoleResponse], summary="List roles")
async def list_roles(auth: CanRead, db: DBSession, recorder: Recorder) -> list[RoleResponse]:
    """List the roles of the caller's tenant."""
    roles = await RoleService(db, auth, recorder).list_roles()
    return [RoleResponse.model_validate(role) for role in roles]


@router.get("/{role_id}", response_model=RoleResponse, summary="Get role by ID")
async def get_role(
    role_id: UUID, auth: CanRead, db: DBSession, recorder: Recorder
) -> RoleResponse:
    """Get one role."""
    return RoleResponse.model_validate(await RoleService(db, auth, recorder).get_role(role_id))


@router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update role",
    description=(
        "Edit a role's name, description, or permission set. Unknown actions "
        "are rejected. Changes apply to every holder on their next request."
    ),
)
async def update_role(
    role_id: UUID,
    data: RoleUpdate,
    auth: CanWrite,
    db: DBSession,
    recorder: Recorder,
    cache: PermCache,
    info: ClientInfo,
) -> RoleResponse:
    """Update a role."""
    service = RoleService(db, auth, recorder, cache, info)
    return RoleResponse.model_validate(await service.update_role(role_id, data))
