"""Account API routes."""

from fastapi import APIRouter

from salescrm.core.resources.router import register_resource_routes
from salescrm.modules.accounts.schemas import (
    AccountCreate,
    AccountFilters,
    AccountResponse,
    AccountUpdate,
)
from salescrm.modules.accounts.services import AccountService


router = APIRouter(prefix="/accounts", tags=["accounts"])

register_resource_routes(
    router,
    service_class=AccountService,
    create_schema=AccountCreate,
    update_schema=AccountUpdate,
    response_schema=AccountResponse,
    filter_schema=AccountFilters,
)
