import asyncio
import uuid

import httpx
import pytest

from price_alerts.catalog import HttpProductCatalog
from price_alerts.core import CatalogUnavailable


def _catalog(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://catalog.test/api")
    return HttpProductCatalog("http://catalog.test/api", client=client)


def _async_catalog(handler):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://catalog.test/api"
    )
    return HttpProductCatalog("http://catalog.test/api", async_client=client)


def test_resolves_product():
    product_id = uuid.uuid4()

    def handler(request):
        assert request.url.path == f"/api/products/{product_id}"
        return httpx.Response(
            200,
            json={"id": str(product_id), "name": "Camera", "currentPrice": 45000, "currency": "EUR"},
        )

    product = _catalog(handler).get_product(product_id)

    assert product.id == product_id
    assert product.name == "Camera"
    assert product.current_price == 45000
    assert product.currency == "EUR"


def test_unwraps_product_envelope():
    product_id = uuid.uuid4()

    def handler(request):
        return httpx.Response(
            200, json={"product": {"id": str(product_id), "name": "Camera", "currentPrice": 1}}
        )

    assert _catalog(handler).get_product(product_id).currency == "USD"


def test_missing_product_is_none():
    assert _catalog(lambda request: httpx.Response(404)).get_product(uuid.uuid4()) is None


def test_server_error_raises():
    with pytest.raises(CatalogUnavailable):
        _catalog(lambda request: httpx.Response(503)).get_product(uuid.uuid4())


def test_connection_error_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(CatalogUnavailable):
        _catalog(handler).get_product(uuid.uuid4())


def test_close_releases_client():
    catalog = _catalog(lambda request: httpx.Response(404))
    with catalog:
        pass
    with pytest.raises(RuntimeError):
        catalog.get_product(uuid.uuid4())


def test_fetch_product_waits_without_blocking(run_with_ticker):
    product_id = uuid.uuid4()

    async def handler(request):
        await asyncio.sleep(0.3)
        return httpx.Response(
            200, json={"id": str(product_id), "name": "Camera", "currentPrice": 45000}
        )

    product, stall = run_with_ticker(_async_catalog(handler).fetch_product(product_id))

    assert product.name == "Camera"
    assert stall < 0.2


def test_fetch_product_maps_errors():
    catalog = _async_catalog(lambda request: httpx.Response(503))

    with pytest.raises(CatalogUnavailable):
        asyncio.run(catalog.fetch_product(uuid.uuid4()))
    assert asyncio.run(
        _async_catalog(lambda request: httpx.Response(404)).fetch_product(uuid.uuid4())
    ) is None


def test_aclose_releases_both_clients():
    catalog = _async_catalog(lambda request: httpx.Response(404))

    asyncio.run(catalog.aclose())

    with pytest.raises(RuntimeError):
        catalog.get_product(uuid.uuid4())
    with pytest.raises(RuntimeError):
        asyncio.run(catalog.fetch_product(uuid.uuid4()))
