"""Note API routes."""

from fastapi import APIRouter

from salescrm.core.resources.router import register_resource_routes
from salescrm.modules.notes.schemas import NoteCreate, NoteFilters, NoteResponse, NoteUpdate
from salescrm.modules.notes.services import NoteService


router = APIRouter(prefix="/notes", tags=["notes"])

register_resource_routes(
    router,
    service_class=NoteService,
    create_schema=NoteCreate,
    update_schema=NoteUpdate,
    response_schema=NoteResponse,
    filter_schema=NoteFilters,
)
