"""Global search route."""

from typing import Annotated

from fastapi import APIRouter, Query

from salescrm.api.dependencies import DBSession
from salescrm.core.auth.dependencies import CurrentAuth, Recorder
from salescrm.core.constants import MIN_SEARCH_QUERY_LENGTH
from salescrm.modules.search.schemas import SearchResponse
from salescrm.modules.search.services import SearchService, parse_entities


router = APIRouter(prefix="/search", tags=["search"])


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search records",
    description=(
        "Search accounts, contacts, leads and opportunities in the caller's "
        "tenant. Entities the caller cannot read are skipped."
    ),
)
async def search(
    auth: CurrentAuth,
    db: DBSession,
    recorder: Recorder,
    q: Annotated[str, Query(min_length=MIN_SEARCH_QUERY_LENGTH, max_length=200)],
    entities: Annotated[
        str | None,
        Query(description="Comma-separated subset, e.g. accounts,contacts"),
    ] = None,
) -> SearchResponse:
    """Search across entities."""
    service = SearchService(db, auth, recorder)
    results = await service.search(q, parse_entities(entities))
    return SearchResponse(query=q, results=results)
