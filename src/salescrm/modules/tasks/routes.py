"""Task API routes."""

from fastapi import APIRouter

from salescrm.core.resources.router import register_resource_routes
from salescrm.modules.tasks.schemas import TaskCreate, TaskFilters, TaskResponse, TaskUpdate
from salescrm.modules.tasks.services import TaskService


router = APIRouter(prefix="/tasks", tags=["tasks"])

register_resource_routes(
    router,
    service_class=TaskService,
    create_schema=TaskCreate,
    update_schema=TaskUpdate,
    response_schema=TaskResponse,
    filter_schema=TaskFilters,
)
