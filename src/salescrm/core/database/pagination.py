"""Page/limit pagination primitives shared by every list endpoint."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from salescrm.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


T = TypeVar("T")


@dataclass(frozen=True)
class PageParams:
    """Validated page request.

    ``page`` is 1-based. Use ``create`` to build one from raw input so
    out-of-range values are clamped.
    """

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def create(
        cls,
        page: int | None = None,
        limit: int | None = None,
        *,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> "PageParams":
        """Clamp raw page/limit values into the supported range."""
        page = max(1, page or 1)
        limit = default_limit if limit is None else limit
        limit = min(max(1, limit), max_limit)
        return cls(page=page, limit=limit)

    @property
    def skip(self) -> int:
        """Number of rows to skip before this page."""
        return (self.page - 1) * self.limit


class PageMeta(BaseModel):
    """Pagination metadata returned next to each page of results."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, params: PageParams, total: int) -> "PageMeta":
        """Compute page counts for ``total`` matching rows."""
        total_pages = math.ceil(total / params.limit) if total else 0
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=total_pages,
            has_next=params.page < total_pages,
            has_prev=params.page > 1,
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of ORM rows plus its metadata."""

    items: list[T]
    meta: PageMeta


class PageResponse(BaseModel, Generic[T]):
    """Response envelope: ``{"data": [...], "meta": {...}}``."""

    data: list[T]
    meta: PageMeta
