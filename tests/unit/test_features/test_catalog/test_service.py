"""Tests for CatalogItemService."""
from __future__ import annotations

from unittest.mock import patch

import pytest

from catalog_service.core.exceptions import InvalidParameterException, NotFoundException
from catalog_service.core.pagination import paginate
from catalog_service.core.settings.cache import CatalogCacheSettings
from catalog_service.features.catalog.schemas import BooleanFilter, CatalogItemsRequest
from catalog_service.features.catalog.service import CatalogItemService

PAGINATE = "catalog_service.features.catalog.service.paginate"


@pytest.fixture
def service(db_session, fake_cache, catalog_cache_settings) -> CatalogItemService:
    return CatalogItemService(db_session, cache=fake_cache, settings=catalog_cache_settings)


def _ids(connection) -> list[str]:
    return [node.id for node in connection.nodes]


@pytest.mark.asyncio
class TestListItems:
    async def test_default_sort_is_priority(self, service, catalog_items):
        request = CatalogItemsRequest(shop_ids=["shop-1"], first=3, sort_order="desc")

        connection = await service.list_items(request)

        assert _ids(connection) == ["item-09", "item-08", "item-07"]
        assert connection.total_count == 10
        assert connection.page_info.has_next_page is True

    async def test_nodes_are_read_schemas(self, service, catalog_items):
        connection = await service.list_items(CatalogItemsRequest(shop_ids=["shop-2"]))

        node = connection.nodes[0]
        assert node.model_dump(by_alias=True)["shopId"] == "shop-2"
        assert isinstance(node.min_price, float)

    async def test_filters_apply(self, service, catalog_items):
        request = CatalogItemsRequest(
            shop_ids=["shop-1"],
            boolean_filters=[BooleanFilter(name="isSoldOut", value=False)],
            sort_by="minPrice",
            first=2,
        )

        connection = await service.list_items(request)

        assert _ids(connection) == ["item-09", "item-08"]
        assert connection.total_count == 8

    async def test_featured_sort(self, service, catalog_items):
        request = CatalogItemsRequest(tag_ids=["tag-a"], sort_by="featured", first=2)

        connection = await service.list_items(request)

        assert _ids(connection) == ["item-08", "item-06"]
        assert connection.total_count == 5

    async def test_featured_without_tag(self, service, catalog_items):
        with pytest.raises(NotFoundException):
            await service.list_items(CatalogItemsRequest(sort_by="featured"))

    async def test_invalid_connection_args(self, service, catalog_items, fake_cache):
        with pytest.raises(InvalidParameterException):
            await service.list_items(CatalogItemsRequest(first=1, last=1))

        assert fake_cache.set_calls == []

    async def test_second_read_is_served_from_cache(self, service, catalog_items):
        request = CatalogItemsRequest(shop_ids=["shop-1"], first=3)

        with patch(PAGINATE, wraps=paginate) as spy:
            first = await service.list_items(request)
            second = await service.list_items(request)

        assert spy.await_count == 1
        assert first == second

    async def test_include_flags_are_part_of_the_key(self, service, catalog_items):
        request = CatalogItemsRequest(shop_ids=["shop-1"], first=3)

        with_count = await service.list_items(request)
        without_count = await service.list_items(request, include_total_count=False)

        assert with_count.total_count == 10
        assert without_count.total_count is None

    async def test_mark_updated_forces_a_reload(self, service, catalog_items, db_session):
        request = CatalogItemsRequest(shop_ids=["shop-1"], first=1, sort_order="desc")
        await service.list_items(request)

        catalog_items[0].priority = 100
        await db_session.commit()

        assert _ids(await service.list_items(request)) == ["item-09"]
        assert await service.mark_catalog_updated() is True
        assert _ids(await service.list_items(request)) == ["item-00"]

    async def test_cache_failure_falls_back_to_the_store(self, service, catalog_items, fake_cache):
        fake_cache.fail_on.update({"get", "set"})

        connection = await service.list_items(CatalogItemsRequest(shop_ids=["shop-2"]))

        assert _ids(connection) == ["other-00", "other-01"]


@pytest.mark.asyncio
class TestCacheDisabled:
    async def test_disabled_cache_is_never_touched(self, db_session, fake_cache, catalog_items):
        service = CatalogItemService(
            db_session,
            cache=fake_cache,
            settings=CatalogCacheSettings(enabled=False),
        )

        await service.list_items(CatalogItemsRequest(first=2))

        assert fake_cache.get_calls == []
        assert fake_cache.set_calls == []
        assert await service.mark_catalog_updated() is False

    async def test_no_cache(self, db_session, catalog_cache_settings, catalog_items):
        service = CatalogItemService(db_session, settings=catalog_cache_settings, default_limit=4)

        connection = await service.list_items(CatalogItemsRequest(shop_ids=["shop-1"]))

        assert len(connection.nodes) == 4
        assert await service.mark_catalog_updated() is False


@pytest.mark.asyncio
async def test_mark_updated_reports_cache_failure(service, fake_cache):
    fake_cache.fail_on.add("set")

    assert await service.mark_catalog_updated() is False
