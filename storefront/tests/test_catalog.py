"""
Catalog cache and filter.
"""
import asyncio
import pytest
from unittest.mock import AsyncMock

from storefront.catalog import CatalogCache, FETCH_FAILED_MESSAGE, NO_PRODUCTS_MESSAGE
from storefront.services.api_gateway import ApiGateway

from conftest import make_gateway, ok, unreachable


@pytest.mark.asyncio
async def test_fetch_populates_cache(raw_products, notices):
    gateway = make_gateway({("GET", "/products"): ok(raw_products)})
    catalog = CatalogCache(gateway, notices)

    products = await catalog.fetch_catalog()

    assert [p.name for p in products] == ["iPhone XR", "Basketball", "OnePlus 6"]
    assert catalog.is_loaded
    assert catalog.loading is False
    assert catalog.lookup("upLK9JbQ4rMhTwt4").name == "Basketball"
    assert catalog.lookup("not-there") is None
    gateway.call.assert_awaited_once_with("/products")


@pytest.mark.asyncio
async def test_loading_is_set_for_the_call_duration(raw_products, notices):
    seen = []
    gateway = AsyncMock(spec=ApiGateway)
    catalog = CatalogCache(gateway, notices)

    async def call(path, **kwargs):
        seen.append(catalog.loading)
        return ok(raw_products)

    gateway.call.side_effect = call
    await catalog.fetch_catalog()

    assert seen == [True]
    assert catalog.loading is False


@pytest.mark.asyncio
async def test_transport_failure_keeps_previous_cache(raw_products, notices):
    gateway = make_gateway({("GET", "/products"): [ok(raw_products), unreachable()]})
    catalog = CatalogCache(gateway, notices)
    await catalog.fetch_catalog()

    result = await catalog.fetch_catalog()

    assert result is None
    assert len(catalog.products) == 3
    assert notices.errors == [FETCH_FAILED_MESSAGE]
    assert catalog.loading is False


@pytest.mark.asyncio
async def test_backend_message_is_shown_verbatim(raw_products, notices):
    failure = {"success": False, "message": "Something went wrong. Check the backend console for more details"}
    gateway = make_gateway({("GET", "/products"): [ok(raw_products), ok(failure)]})
    catalog = CatalogCache(gateway, notices)
    await catalog.fetch_catalog()

    assert await catalog.fetch_catalog() is None

    assert notices.latest.text == failure["message"]
    assert len(catalog.products) == 3


@pytest.mark.asyncio
async def test_empty_list_gets_generic_message(notices):
    gateway = make_gateway({("GET", "/products"): ok([])})
    catalog = CatalogCache(gateway, notices)

    assert await catalog.fetch_catalog() is None

    assert notices.errors == [FETCH_FAILED_MESSAGE]
    assert not catalog.is_loaded


@pytest.mark.asyncio
async def test_unusable_records_are_skipped(raw_products, notices):
    raw_products.append({"name": "No id", "cost": 1})
    raw_products.append({"_id": "neg", "name": "Negative", "cost": -3})
    gateway = make_gateway({("GET", "/products"): ok(raw_products)})
    catalog = CatalogCache(gateway, notices)

    products = await catalog.fetch_catalog()

    assert len(products) == 3
    assert notices.errors == []


@pytest.mark.asyncio
async def test_all_records_unusable_leaves_cache_alone(notices):
    gateway = make_gateway({("GET", "/products"): ok([{"name": "broken"}])})
    catalog = CatalogCache(gateway, notices)

    assert await catalog.fetch_catalog() is None
    assert notices.errors == [NO_PRODUCTS_MESSAGE]


@pytest.mark.asyncio
async def test_filter_matches_name_or_category_without_network(raw_products, notices):
    gateway = make_gateway({("GET", "/products"): ok(raw_products)})
    catalog = CatalogCache(gateway, notices)
    await catalog.fetch_catalog()

    assert [p.name for p in catalog.filter("PHONE")] == ["iPhone XR", "OnePlus 6"]
    assert [p.name for p in catalog.filter("sport")] == ["Basketball"]
    assert [p.name for p in catalog.filter("plus")] == ["OnePlus 6"]
    assert len(catalog.filter("")) == 3
    assert catalog.filter("thisFilterTextShouldNeverMatchAnActualProduct") == []
    assert gateway.call.await_count == 1


@pytest.mark.asyncio
async def test_overlapping_fetches_last_started_wins(raw_products, notices):
    release_first = asyncio.Event()
    gateway = AsyncMock(spec=ApiGateway)
    responses = [raw_products[:1], raw_products[1:]]

    async def call(path, **kwargs):
        body = responses.pop(0)
        if len(responses) == 1:
            await release_first.wait()
        return ok(body)

    gateway.call.side_effect = call
    catalog = CatalogCache(gateway, notices)

    first = asyncio.create_task(catalog.fetch_catalog())
    await asyncio.sleep(0)
    second = await catalog.fetch_catalog()
    assert catalog.loading is True

    release_first.set()
    assert await first is None

    assert [p.name for p in second] == ["Basketball", "OnePlus 6"]
    assert [p.name for p in catalog.products] == ["Basketball", "OnePlus 6"]
    assert catalog.loading is False


@pytest.mark.asyncio
async def test_staleness_and_ensure_loaded(raw_products, notices):
    gateway = make_gateway({("GET", "/products"): ok(raw_products)})
    catalog = CatalogCache(gateway, notices, max_age=60)

    assert catalog.is_stale()
    await catalog.ensure_loaded()
    await catalog.ensure_loaded()

    assert not catalog.is_stale()
    assert gateway.call.await_count == 1

    always_stale = CatalogCache(gateway, notices, max_age=0)
    await always_stale.ensure_loaded()
    assert always_stale.is_stale()


@pytest.mark.asyncio
async def test_non_finite_numbers_do_not_break_fetch(raw_products, notices):
    # 1e999 in a JSON body parses to inf
    body = raw_products + [
        {"_id": "huge", "name": "Huge", "category": "Misc", "cost": 1, "rating": float("inf")},
        {"_id": "nan", "name": "Nan", "category": "Misc", "cost": float("nan"), "rating": 1}
    ]
    catalog = CatalogCache(make_gateway({("GET", "/products"): ok(body)}), notices)

    products = await catalog.fetch_catalog()

    assert [p.id for p in products][-1] == "huge"
    assert catalog.lookup("huge").rating == 0
    assert catalog.lookup("nan") is None
    assert notices.errors == []
