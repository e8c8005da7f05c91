"""Route factory for tenant-scoped CRUD resources.

Every CRM module registers the same five endpoints, each guarded by the
matching permission:

    GET    /{resource}            read
    GET    /{resource}/{item_id}  read
    POST   /{resource}            write
    PATCH  /{resource}/{item_id}  write
    DELETE /{resource}/{item_id}  delete

Modules add their own routes to the router *before* calling
``register_resource_routes`` so static paths win over ``/{item_id}``.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel

from salescrm.api.dependencies import DBSession
from salescrm.core.auth.dependencies import ClientInfo, Recorder, require_permission
from salescrm.core.auth.flow import AuthContext
from salescrm.core.database.pagination import PageParams, PageResponse
from salescrm.core.permissions.policy import Action
from salescrm.core.resources.service import TenantResourceService


def page_params(
    request: Request,
    page: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
    limit: Annotated[
        int | None, Query(description="Page size, clamped to the allowed range")
    ] = None,
) -> PageParams:
    """Read and clamp pagination query parameters."""
    settings = request.app.state.settings
    return PageParams.create(
        page,
        limit,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )


Pagination = Annotated[PageParams, Depends(page_params)]


def search_term(
    search: Annotated[
        str | None,
        Query(max_length=200, description="Case-insensitive substring match"),
    ] = None,
) -> str | None:
    """Read the free-text list filter.

    The filter model must be the list endpoint's only query parameter
    for FastAPI to expand it into individual keys.
    """
    return search


SearchTerm = Annotated[str | None, Depends(search_term)]


def register_resource_routes(
    router: APIRouter,
    *,
    service_class: type[TenantResourceService[Any]],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    response_schema: type[BaseModel],
    filter_schema: type[BaseModel],
) -> APIRouter:
    """Attach list/get/create/update/delete routes for one resource.

    Args:
        router: Router carrying the resource prefix and tags
        service_class: Service implementing the resource
        create_schema: Body schema for POST
        update_schema: Body schema for PATCH
        response_schema: Schema for single-record responses
        filter_schema: Query model of equality filters for list

    Returns:
        The same router, for chaining
    """
    resource = service_class.resource
    label = service_class.label
    list_response = PageResponse[response_schema]  # type: ignore[valid-type]

    CanRead = Annotated[AuthContext, Depends(require_permission(resource, Action.READ))]
    CanWrite = Annotated[AuthContext, Depends(require_permission(resource, Action.WRITE))]
    CanDelete = Annotated[
        AuthContext, Depends(require_permission(resource, Action.DELETE))
    ]

    @router.get(
        "",
        response_model=list_response,
        summary=f"List {resource}",
        description=f"Paginated {resource} in the caller's tenant, newest first.",
    )
    async def list_records(
        auth: CanRead,
        db: DBSession,
        recorder: Recorder,
        params: Pagination,
        filters: Annotated[filter_schema, Query()],  # type: ignore[valid-type]
        search: SearchTerm,
    ) -> Any:
        service = service_class(db, auth, recorder)
        page = await service.list(
            params, search=search, filters=filters.model_dump(exclude_none=True)
        )
        return list_response(
            data=[response_schema.model_validate(item) for item in page.items],
            meta=page.meta,
        )

    @router.get(
        "/{item_id}",
        response_model=response_schema,
        summary=f"Get one {label.lower()}",
    )
    async def get_record(
        item_id: UUID,
        auth: CanRead,
        db: DBSession,
        recorder: Recorder,
    ) -> Any:
        service = service_class(db, auth, recorder)
        return response_schema.model_validate(await service.get(item_id))

    @router.post(
        "",
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {label.lower()}",
    )
    async def create_record(
        data: create_schema,  # type: ignore[valid-type]
        auth: CanWrite,
        db: DBSession,
        recorder: Recorder,
        info: ClientInfo,
    ) -> Any:
        service = service_class(db, auth, recorder, info)
        return response_schema.model_validate(await service.create(data))

    @router.patch(
        "/{item_id}",
        response_model=response_schema,
        summary=f"Update a {label.lower()}",
    )
    async def update_record(
        item_id: UUID,
        data: update_schema,  # type: ignore[valid-type]
        auth: CanWrite,
        db: DBSession,
        recorder: Recorder,
        info: ClientInfo,
    ) -> Any:
        service = service_class(db, auth, recorder, info)
        return response_schema.model_validate(await service.update(item_id, data))

    @router.delete(
        "/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete a {label.lower()}",
        description="Soft delete: the record is deactivated and hidden from reads.",
    )
    async def delete_record(
        item_id: UUID,
        auth: CanDelete,
        db: DBSession,
        recorder: Recorder,
        info: ClientInfo,
    ) -> None:
        service = service_class(db, auth, recorder, info)
        await service.delete(item_id)

    return router
