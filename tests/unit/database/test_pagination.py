"""Unit tests for page parameters and page metadata."""

import pytest

from salescrm.core.database.pagination import PageMeta, PageParams


pytestmark = pytest.mark.unit


class TestPageParams:
    """Tests for PageParams.create clamping."""

    def test_defaults(self):
        params = PageParams.create(default_limit=20)

        assert params.page == 1
        assert params.limit == 20
        assert params.skip == 0

    @pytest.mark.parametrize(
        ("limit", "expected"),
        [(0, 1), (-5, 1), (1, 1), (50, 50), (100, 100), (101, 100), (10_000, 100)],
    )
    def test_limit_clamped(self, limit: int, expected: int):
        assert PageParams.create(1, limit, max_limit=100).limit == expected

    @pytest.mark.parametrize("page", [0, -3, None])
    def test_page_floor_is_one(self, page: int | None):
        assert PageParams.create(page, 10).page == 1

    def test_skip(self):
        assert PageParams.create(3, 25).skip == 50


class TestPageMeta:
    """Tests for PageMeta.build."""

    def test_middle_page(self):
        meta = PageMeta.build(PageParams(page=2, limit=10), total=35)

        assert meta.total_pages == 4
        assert meta.has_next is True
        assert meta.has_prev is True

    def test_last_page(self):
        meta = PageMeta.build(PageParams(page=4, limit=10), total=35)

        assert meta.has_next is False
        assert meta.has_prev is True

    def test_exact_multiple(self):
        meta = PageMeta.build(PageParams(page=1, limit=10), total=20)

        assert meta.total_pages == 2
        assert meta.has_next is True

    def test_empty(self):
        meta = PageMeta.build(PageParams(page=1, limit=10), total=0)

        assert meta.total_pages == 0
        assert meta.has_next is False
        assert meta.has_prev is False

    def test_page_past_the_end(self):
        meta = PageMeta.build(PageParams(page=9, limit=10), total=5)

        assert meta.total_pages == 1
        assert meta.has_next is False
        assert meta.has_prev is True

    def test_serializes_camel_case(self):
        meta = PageMeta.build(PageParams(page=1, limit=10), total=11)

        assert meta.model_dump(by_alias=True) == {
            "page": 1,
            "limit": 10,
            "total": 11,
            "totalPages": 2,
            "hasNext": True,
            "hasPrev": False,
        }
