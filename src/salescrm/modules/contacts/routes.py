"""Contact API routes."""

from fastapi import APIRouter

from salescrm.core.resources.router import register_resource_routes
from salescrm.modules.contacts.schemas import (
    ContactCreate,
    ContactFilters,
    ContactResponse,
    ContactUpdate,
)
from salescrm.modules.contacts.services import ContactService


router = APIRouter(prefix="/contacts", tags=["contacts"])

register_resource_routes(
    router,
    service_class=ContactService,
    create_schema=ContactCreate,
    update_schema=ContactUpdate,
    response_schema=ContactResponse,
    filter_schema=ContactFilters,
)
