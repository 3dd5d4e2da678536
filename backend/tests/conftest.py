"""Pytest configuration and fixtures"""
import pytest
from fastapi.testclient import TestClient

from cart_engine.core.config import Settings
from cart_engine.main import create_app
from cart_engine.models.cart_model import Product
from cart_engine.services.cart_store import CartStore
from cart_engine.services.catalog_service import LocalCatalog
from cart_engine.services.pricing_service import PricingEngine
from cart_engine.services.validation_service import ValidationEngine


# Round prices so expected totals can be written by hand
TEST_PRODUCTS = [
    Product(id=1, title="Essence Mascara Lash Princess", price=10.0, discount_percentage=50.0),
    Product(id=98, title="Rolex Submariner Watch", price=25.5),
    Product(id=144, title="Cricket Helmet", price=40.0, discount_percentage=10.0,
            thumbnail="https://cdn.example.com/helmet.png"),
    Product(id=150, title="Tennis Racket", price=0.0),
]


@pytest.fixture
def test_settings():
    """Settings with an empty store and a short lock timeout"""
    return Settings(SEED_CARTS=False, CART_LOCK_TIMEOUT_SECONDS=0.2, LOG_LEVEL="WARNING")


@pytest.fixture
def catalog():
    return LocalCatalog(TEST_PRODUCTS)


@pytest.fixture
def pricing(catalog):
    return PricingEngine(catalog)


@pytest.fixture
def validator():
    return ValidationEngine(max_quantity=99)


@pytest.fixture
def store(pricing):
    return CartStore(pricing, lock_timeout=0.2)


@pytest.fixture
def test_client(test_settings, catalog):
    """HTTP client over an isolated app with the test catalog"""
    app = create_app(test_settings, catalog=catalog)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def seeded_client():
    """HTTP client over an app seeded with the bundled demo carts and catalog"""
    app = create_app(Settings(LOG_LEVEL="WARNING"))
    with TestClient(app) as client:
        yield client
