"""Integration tests for the catalog API endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from catalog_service.infra.logging import ContextInjectingFilter

if TYPE_CHECKING:
    from httpx import AsyncClient

URL = "/api/v1/catalog-items"


@pytest.mark.asyncio
async def test_list_catalog_items(client: AsyncClient, catalog_items):
    """First page uses camelCase and the default priority sort."""
    response = await client.get(URL, params={"shopIds": "shop-1", "first": 3})
    assert response.status_code == 200

    data = response.json()
    assert [node["id"] for node in data["nodes"]] == ["item-00", "item-01", "item-02"]
    assert data["totalCount"] == 10
    assert data["pageInfo"] == {
        "hasNextPage": True,
        "hasPreviousPage": False,
        "startCursor": "item-00",
        "endCursor": "item-02",
    }
    assert data["nodes"][0]["shopId"] == "shop-1"
    assert data["nodes"][0]["isBanner"] is True


@pytest.mark.asyncio
async def test_follow_end_cursor(client: AsyncClient, catalog_items):
    """The end cursor of one page starts the next."""
    params = {"shopIds": "shop-1", "first": 4, "sortBy": "minPrice"}
    first = (await client.get(URL, params=params)).json()

    response = await client.get(URL, params={**params, "after": first["pageInfo"]["endCursor"]})
    assert response.status_code == 200

    data = response.json()
    assert [node["id"] for node in data["nodes"]] == ["item-05", "item-04", "item-03", "item-02"]
    assert data["pageInfo"]["hasPreviousPage"] is True


@pytest.mark.asyncio
async def test_repeated_query_params_and_filters(client: AsyncClient, catalog_items):
    """List parameters repeat; boolean filters use name:value."""
    response = await client.get(
        URL,
        params=[
            ("tagIds", "tag-a"),
            ("tagIds", "tag-c"),
            ("booleanFilters", "isSoldOut:false"),
            ("isBanner", "false"),
        ],
    )
    assert response.status_code == 200

    ids = [node["id"] for node in response.json()["nodes"]]
    assert ids == ["other-01", "item-02", "item-06", "item-08"]


@pytest.mark.asyncio
async def test_unrequested_fields_are_omitted(client: AsyncClient, catalog_items):
    """Fields the caller opts out of are left out of the response."""
    response = await client.get(
        URL,
        params={
            "first": 2,
            "includeTotalCount": "false",
            "includeHasPreviousPage": "false",
        },
    )
    assert response.status_code == 200

    data = response.json()
    assert "totalCount" not in data
    assert "hasPreviousPage" not in data["pageInfo"]
    assert data["pageInfo"]["hasNextPage"] is True


@pytest.mark.asyncio
async def test_first_and_last_is_a_bad_request(client: AsyncClient, catalog_items):
    """Mutually exclusive arguments produce a 400 problem document."""
    response = await client.get(URL, params={"first": 1, "last": 1})
    assert response.status_code == 400

    data = response.json()
    assert data["type"] == "invalid-parameter"
    assert data["title"] == "Invalid Parameter"
    assert data["status"] == 400
    assert data["instance"] == URL


@pytest.mark.asyncio
async def test_malformed_boolean_filter(client: AsyncClient):
    response = await client.get(URL, params={"booleanFilters": "isSoldOut"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_cursor_is_not_found(client: AsyncClient, catalog_items):
    response = await client.get(URL, params={"after": "missing"})
    assert response.status_code == 404

    data = response.json()
    assert data["type"] == "not-found"
    assert data["cursor"] == "missing"


@pytest.mark.asyncio
async def test_featured_sort_requires_tag(client: AsyncClient, catalog_items):
    response = await client.get(URL, params={"sortBy": "featured"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_non_integer_page_size_is_a_validation_error(client: AsyncClient):
    response = await client.get(URL, params={"first": "many"})
    assert response.status_code == 422

    data = response.json()
    assert data["type"] == "validation-error"
    assert data["errors"][0]["field"] == "query.first"


@pytest.mark.asyncio
async def test_invalidate_cache(client: AsyncClient, catalog_items, fake_cache):
    """Invalidation sets the dirty flag so the next read reloads."""
    await client.get(URL, params={"first": 1})

    response = await client.post(f"{URL}/cache/invalidate")
    assert response.status_code == 204
    assert fake_cache.store["isCatalogUpdated"] == "true"

    await client.get(URL, params={"first": 1})
    assert fake_cache.store["isCatalogUpdated"] == "false"


@pytest.mark.asyncio
async def test_metrics_endpoint(client: AsyncClient, catalog_items):
    await client.get(URL, params={"first": 1})

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "pagination_pages_total" in response.text
    assert "cache_misses_total" in response.text


@pytest.mark.asyncio
async def test_sort_by_nullable_field_visits_every_item_once(client: AsyncClient, catalog_items):
    """Items without a featured rank come after ranked ones, none are skipped."""
    params = {"shopIds": "shop-1", "first": 3, "sortBy": "featuredRank"}
    seen: list[str] = []
    cursor = None
    while True:
        query = params if cursor is None else {**params, "after": cursor}
        response = await client.get(URL, params=query)
        assert response.status_code == 200

        data = response.json()
        seen.extend(node["id"] for node in data["nodes"])
        if not data["pageInfo"]["hasNextPage"]:
            break
        cursor = data["pageInfo"]["endCursor"]

    assert seen == [
        "item-08", "item-06", "item-04", "item-02", "item-00",
        "item-01", "item-03", "item-05", "item-07", "item-09",
    ]


@pytest.mark.asyncio
async def test_request_id_is_echoed_and_logged(client: AsyncClient, catalog_items, caplog):
    """Records logged while handling a request carry its X-Request-ID."""
    caplog.set_level(logging.INFO)
    caplog.handler.addFilter(ContextInjectingFilter())

    response = await client.get(
        URL, params={"after": "missing"}, headers={"X-Request-ID": "req-abc"},
    )

    assert response.status_code == 404
    assert response.headers["x-request-id"] == "req-abc"
    rejected = [r for r in caplog.records if r.getMessage() == "Request rejected"]
    assert rejected
    assert rejected[0].request_id == "req-abc"


@pytest.mark.asyncio
async def test_request_id_is_generated_when_missing(client: AsyncClient, catalog_items):
    first = await client.get(URL, params={"first": 1})
    second = await client.get(URL, params={"first": 1})

    assert first.headers["x-request-id"]
    assert first.headers["x-request-id"] != second.headers["x-request-id"]
