"""Opportunity and pipeline API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from salescrm.api.dependencies import DBSession
from salescrm.core.auth.dependencies import Recorder, require_permission
from salescrm.core.auth.flow import AuthContext
from salescrm.core.permissions.policy import Action, Resource
from salescrm.core.resources.router import register_resource_routes
from salescrm.modules.opportunities.schemas import (
    OpportunityCreate,
    OpportunityFilters,
    OpportunityResponse,
    OpportunityUpdate,
    SalesStageResponse,
)
from salescrm.modules.opportunities.services import OpportunityService


router = APIRouter(prefix="/opportunities", tags=["opportunities"])


@router.get(
    "/stages",
    response_model=list[SalesStageResponse],
    summary="List sales stages",
    description="The caller's tenant pipeline, in stage order.",
)
async def list_stages(
    auth: Annotated[
        AuthContext,
        Depends(require_permission(Resource.OPPORTUNITIES, Action.READ)),
    ],
    db: DBSession,
    recorder: Recorder,
) -> list[SalesStageResponse]:
    """List sales stages."""
    service = OpportunityService(db, auth, recorder)
    return [SalesStageResponse.model_validate(s) for s in await service.stages()]


register_resource_routes(
    router,
    service_class=OpportunityService,
    create_schema=OpportunityCreate,
    update_schema=OpportunityUpdate,
    response_schema=OpportunityResponse,
    filter_schema=OpportunityFilters,
)
