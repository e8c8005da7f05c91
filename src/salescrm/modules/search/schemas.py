"""Pydantic schemas for global search."""

from uuid import UUID

from salescrm.core.resources.schemas import APIModel


class SearchHit(APIModel):
    id: UUID
    title: str
    subtitle: str | None = None


class SearchResponse(APIModel):
    """Hits grouped by entity. Only entities the caller can read appear."""

    query: str
    results: dict[str, list[SearchHit]]
