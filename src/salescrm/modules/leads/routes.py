"""Lead API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from salescrm.api.dependencies import DBSession
from salescrm.core.auth.dependencies import ClientInfo, Recorder, require_permission
from salescrm.core.auth.flow import AuthContext
from salescrm.core.permissions.policy import Action, Resource
from salescrm.core.resources.router import register_resource_routes
from salescrm.modules.accounts.schemas import AccountResponse
from salescrm.modules.contacts.schemas import ContactResponse
from salescrm.modules.leads.schemas import (
    LeadConversionResponse,
    LeadConvert,
    LeadCreate,
    LeadFilters,
    LeadResponse,
    LeadUpdate,
)
from salescrm.modules.leads.services import LeadService
from salescrm.modules.opportunities.schemas import OpportunityResponse


router = APIRouter(prefix="/leads", tags=["leads"])


@router.post(
    "/{lead_id}/convert",
    response_model=LeadConversionResponse,
    summary="Convert a lead",
    description=(
        "Create an account and a contact (and optionally an opportunity) from "
        "a lead and mark it converted. Requires write access to each record "
        "type created."
    ),
)
async def convert_lead(
    lead_id: UUID,
    auth: Annotated[AuthContext, Depends(require_permission(Resource.LEADS, Action.WRITE))],
    db: DBSession,
    recorder: Recorder,
    info: ClientInfo,
    data: LeadConvert | None = None,
) -> LeadConversionResponse:
    """Convert a lead."""
    service = LeadService(db, auth, recorder, info)
    result = await service.convert(lead_id, data or LeadConvert())
    return LeadConversionResponse(
        lead=LeadResponse.model_validate(result.lead),
        account=AccountResponse.model_validate(result.account),
        contact=ContactResponse.model_validate(result.contact),
        opportunity=(
            OpportunityResponse.model_validate(result.opportunity)
            if result.opportunity
            else None
        ),
    )


register_resource_routes(
    router,
    service_class=LeadService,
    create_schema=LeadCreate,
    update_schema=LeadUpdate,
    response_schema=LeadResponse,
    filter_schema=LeadFilters,
)
