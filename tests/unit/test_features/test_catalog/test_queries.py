"""Tests for catalog listing query construction."""
from __future__ import annotations

import pytest

from catalog_service.core.exceptions import InvalidParameterException, NotFoundException
from catalog_service.core.pagination import QueryStore, SortSpec
from catalog_service.features.catalog.queries import (
    DEFAULT_SORT_FIELD,
    build_catalog_items_query,
    resolve_catalog_sort,
)
from catalog_service.features.catalog.schemas import BooleanFilter


async def _fetch_ids(session, plan, field: str = "id") -> list[str]:
    rows = await QueryStore(session).fetch(plan.sorted_by(SortSpec(field)))
    return [row.id for row in rows]


@pytest.mark.asyncio
class TestBuildCatalogItemsQuery:
    async def test_no_filters_returns_everything(self, db_session, catalog_items):
        ids = await _fetch_ids(db_session, build_catalog_items_query())

        assert len(ids) == 12

    async def test_shop_and_tag_filters(self, db_session, catalog_items):
        plan = build_catalog_items_query(shop_ids=["shop-1"], tag_ids=["tag-b"])

        assert await _fetch_ids(db_session, plan) == [
            "item-01", "item-03", "item-05", "item-07", "item-09",
        ]

    async def test_is_banner(self, db_session, catalog_items):
        plan = build_catalog_items_query(shop_ids=["shop-1"], is_banner=True)

        assert await _fetch_ids(db_session, plan) == ["item-00"]

    async def test_search_is_case_insensitive(self, db_session, catalog_items):
        plan = build_catalog_items_query(search_query="  blue widget ")

        assert await _fetch_ids(db_session, plan) == ["item-05"]

    async def test_search_escapes_wildcards(self, db_session, catalog_items):
        plan = build_catalog_items_query(search_query="%")

        assert await _fetch_ids(db_session, plan) == []

    async def test_blank_search_is_ignored(self, db_session, catalog_items):
        plan = build_catalog_items_query(shop_ids=["shop-2"], search_query="   ")

        assert await _fetch_ids(db_session, plan) == ["other-00", "other-01"]

    async def test_boolean_filters(self, db_session, catalog_items):
        plan = build_catalog_items_query(
            shop_ids=["shop-1"],
            boolean_filters=[BooleanFilter(name="isSoldOut", value=True)],
        )

        assert await _fetch_ids(db_session, plan) == ["item-03", "item-04"]

    def test_unknown_boolean_filter(self):
        with pytest.raises(InvalidParameterException) as exc_info:
            build_catalog_items_query(boolean_filters=[BooleanFilter(name="isSecret", value=True)])

        assert "isSoldOut" in exc_info.value.extra["allowed"]


class TestResolveCatalogSort:
    def test_default_sort_is_priority(self):
        plan = build_catalog_items_query()

        assert resolve_catalog_sort(plan, None) == (plan, DEFAULT_SORT_FIELD)
        assert DEFAULT_SORT_FIELD == "priority"

    @pytest.mark.parametrize(
        ("sort_by", "field"),
        [
            ("minPrice", "min_price"),
            ("createdAt", "created_at"),
            ("updatedAt", "updated_at"),
            ("featuredRank", "featured_rank"),
            ("title", "title"),
        ],
    )
    def test_aliases(self, sort_by, field):
        plan = build_catalog_items_query()

        assert resolve_catalog_sort(plan, sort_by)[1] == field

    def test_featured_requires_a_tag(self):
        with pytest.raises(NotFoundException):
            resolve_catalog_sort(build_catalog_items_query(), "featured", None)

    def test_featured_rejects_several_tags(self):
        with pytest.raises(InvalidParameterException):
            resolve_catalog_sort(build_catalog_items_query(), "featured", ["tag-a", "tag-b"])

    @pytest.mark.asyncio
    async def test_featured_narrows_to_ranked_items_of_the_tag(self, db_session, catalog_items):
        plan, field = resolve_catalog_sort(build_catalog_items_query(), "featured", ["tag-a"])

        assert field == "featured_rank"
        assert await _fetch_ids(db_session, plan, field) == [
            "item-08", "item-06", "item-04", "item-02", "item-00",
        ]


class TestBooleanFilterParse:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("isSoldOut:true", BooleanFilter(name="isSoldOut", value=True)),
            ("isBanner:False", BooleanFilter(name="isBanner", value=False)),
        ],
    )
    def test_valid(self, raw, expected):
        assert BooleanFilter.parse(raw) == expected

    @pytest.mark.parametrize("raw", ["isSoldOut", "isSoldOut:yes", ":true"])
    def test_invalid(self, raw):
        with pytest.raises(InvalidParameterException):
            BooleanFilter.parse(raw)
