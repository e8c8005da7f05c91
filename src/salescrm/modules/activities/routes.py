"""Activity API routes."""

from fastapi import APIRouter

from salescrm.core.resources.router import register_resource_routes
from salescrm.modules.activities.schemas import (
    ActivityCreate,
    ActivityFilters,
    ActivityResponse,
    ActivityUpdate,
)
from salescrm.modules.activities.services import ActivityService


router = APIRouter(prefix="/activities", tags=["activities"])

register_resource_routes(
    router,
    service_class=ActivityService,
    create_schema=ActivityCreate,
    update_schema=ActivityUpdate,
    response_schema=ActivityResponse,
    filter_schema=ActivityFilters,
)
