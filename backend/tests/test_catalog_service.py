"""Tests for catalog adapters"""
import json

import httpx
import pytest

from cart_engine.core.config import DATA_DIR, Settings
from cart_engine.core.exceptions import CatalogUnavailableError, ProductNotFoundError
from cart_engine.services.catalog_service import Catalog, LocalCatalog, RemoteCatalog, build_catalog
from cart_engine.services.pricing_service import PricingEngine


def remote_catalog(handler):
    client = httpx.AsyncClient(base_url="https://catalog.test", transport=httpx.MockTransport(handler))
    return RemoteCatalog("https://catalog.test", client=client)


@pytest.mark.asyncio
async def test_local_catalog_from_bundled_file():
    catalog = LocalCatalog.from_file(DATA_DIR / "products.json")

    product = await catalog.get_product(144)
    assert product.title == "Cricket Helmet"
    assert product.price == 44.99
    assert await catalog.get_product(999999) is None


@pytest.mark.asyncio
async def test_local_catalog_accepts_plain_list(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps([{"id": 3, "title": "Powder Canister", "price": 14.99}]))

    catalog = LocalCatalog.from_file(path)

    product = await catalog.get_product(3)
    assert product.discount_percentage == 0.0
    assert product.thumbnail is None


@pytest.mark.asyncio
async def test_remote_catalog_resolves_product():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/products/144"
        return httpx.Response(200, json={
            "id": 144, "title": "Cricket Helmet", "price": 44.99,
            "discountPercentage": 10.75, "thumbnail": "https://cdn.test/144.png", "stock": 12,
        })

    catalog = remote_catalog(handler)
    product = await catalog.get_product(144)
    await catalog.close()

    assert product.id == 144
    assert product.discount_percentage == 10.75
    assert product.thumbnail == "https://cdn.test/144.png"


@pytest.mark.asyncio
async def test_remote_catalog_404_is_product_not_found():
    catalog = remote_catalog(lambda request: httpx.Response(404, json={"message": "not found"}))

    assert await catalog.get_product(5) is None
    with pytest.raises(ProductNotFoundError):
        await PricingEngine(catalog).price_item(5, 1)


@pytest.mark.asyncio
async def test_remote_catalog_server_error_is_unavailable():
    catalog = remote_catalog(lambda request: httpx.Response(502, text="bad gateway"))

    with pytest.raises(CatalogUnavailableError) as exc_info:
        await catalog.get_product(5)
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_remote_catalog_transport_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    catalog = remote_catalog(handler)

    with pytest.raises(CatalogUnavailableError):
        await catalog.get_product(5)


@pytest.mark.asyncio
async def test_remote_catalog_invalid_payload_is_unavailable():
    catalog = remote_catalog(lambda request: httpx.Response(200, json={"id": 5}))

    with pytest.raises(CatalogUnavailableError):
        await catalog.get_product(5)


@pytest.mark.asyncio
async def test_build_catalog_selects_backend():
    local = build_catalog(Settings(CATALOG_BACKEND="local"))
    remote = build_catalog(Settings(CATALOG_BACKEND="remote", CATALOG_URL="https://catalog.test/"))

    assert isinstance(local, LocalCatalog)
    assert isinstance(remote, RemoteCatalog)
    assert remote.base_url == "https://catalog.test"
    await remote.close()

    with pytest.raises(ValueError):
        build_catalog(Settings(CATALOG_BACKEND="postgres"))


def test_catalog_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Catalog()


@pytest.mark.asyncio
async def test_remote_catalog_null_discount_defaults_to_zero():
    catalog = remote_catalog(lambda request: httpx.Response(200, json={
        "id": 5, "title": "Red Nail Polish", "price": "8.99", "discountPercentage": None,
    }))

    product = await catalog.get_product(5)

    assert product.price == 8.99
    assert product.discount_percentage == 0.0


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"id": 5, "title": "", "price": 8.99},
    {"id": 5, "title": "Red Nail Polish", "price": -1},
    {"id": 5, "title": "Red Nail Polish", "price": "cheap"},
    ["not", "an", "object"],
])
async def test_remote_catalog_rejects_invalid_products(payload):
    catalog = remote_catalog(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(CatalogUnavailableError):
        await catalog.get_product(5)


@pytest.mark.asyncio
async def test_remote_catalog_non_json_body_is_unavailable():
    catalog = remote_catalog(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(CatalogUnavailableError):
        await catalog.get_product(5)
