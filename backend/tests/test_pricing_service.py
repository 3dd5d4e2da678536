"""
Tests for the pricing engine
"""

import asyncio

import pytest

from cart_engine.core.exceptions import InternalComputationError, ProductNotFoundError
from cart_engine.models.cart_model import CartLineItem, Product
from cart_engine.services.catalog_service import Catalog, LocalCatalog
from cart_engine.services.pricing_service import PricingEngine, round_money


class TestPriceItem:
    """Tests for per-line pricing."""

    @pytest.mark.asyncio
    async def test_price_item_uses_catalog_price(self, pricing):
        line = await pricing.price_item(144, 2)

        assert line.product_id == 144
        assert line.title == "Cricket Helmet"
        assert line.unit_price == 40.0
        assert line.quantity == 2
        assert line.total == 80.0
        assert line.discounted_total == 72.0  # 10% off
        assert line.thumbnail == "https://cdn.example.com/helmet.png"

    @pytest.mark.asyncio
    async def test_price_item_without_discount(self, pricing):
        line = await pricing.price_item(98, 3)

        assert line.total == 76.5
        assert line.discounted_total == 76.5
        assert line.discount_percentage == 0.0

    @pytest.mark.asyncio
    async def test_price_item_unknown_product(self, pricing):
        with pytest.raises(ProductNotFoundError) as exc_info:
            await pricing.price_item(999, 1)

        assert exc_info.value.kind == "ProductNotFound"
        assert exc_info.value.product_id == 999

    @pytest.mark.asyncio
    async def test_discount_is_clamped_to_total(self):
        catalog = LocalCatalog([Product(id=7, title="Odd", price=10.0, discount_percentage=150.0)])
        line = await PricingEngine(catalog).price_item(7, 1)

        assert line.total == 10.0
        assert line.discounted_total == 0.0
        assert line.discount_percentage == 100.0

    @pytest.mark.asyncio
    async def test_negative_discount_never_raises_price(self):
        catalog = LocalCatalog([Product(id=7, title="Odd", price=10.0, discount_percentage=-20.0)])
        line = await PricingEngine(catalog).price_item(7, 2)

        assert line.discounted_total == line.total == 20.0
        assert line.discount_percentage == 0.0

    @pytest.mark.asyncio
    async def test_price_items_keeps_order(self, pricing):
        lines = await pricing.price_items([(98, 1), (1, 2), (144, 1)])

        assert [line.product_id for line in lines] == [98, 1, 144]

    @pytest.mark.asyncio
    async def test_price_items_fails_on_any_unknown_product(self, pricing):
        with pytest.raises(ProductNotFoundError):
            await pricing.price_items([(98, 1), (12345, 1)])

    @pytest.mark.asyncio
    async def test_price_items_cancels_pending_lookups_on_failure(self):
        class StallingCatalog(Catalog):
            """Product 1 never answers; anything else is unknown."""

            def __init__(self):
                self.cancelled = False

            async def get_product(self, product_id):
                if product_id == 1:
                    try:
                        await asyncio.Event().wait()
                    except asyncio.CancelledError:
                        self.cancelled = True
                        raise
                return None

        catalog = StallingCatalog()

        with pytest.raises(ProductNotFoundError):
            await PricingEngine(catalog).price_items([(1, 1), (2, 1)])

        assert catalog.cancelled is True


class TestPriceCart:
    """Tests for cart aggregation."""

    def test_empty_cart(self):
        totals = PricingEngine.price_cart([])

        assert totals.total == 0
        assert totals.discounted_total == 0
        assert totals.total_products == 0
        assert totals.total_quantity == 0

    def test_aggregates_lines(self):
        items = [
            CartLineItem(product_id=1, title="A", quantity=2, unit_price=10.0, total=20.0, discounted_total=10.0),
            CartLineItem(product_id=2, title="B", quantity=1, unit_price=0.1, total=0.1, discounted_total=0.1),
            CartLineItem(product_id=3, title="C", quantity=3, unit_price=0.2, total=0.6, discounted_total=0.6),
        ]

        totals = PricingEngine.price_cart(items)

        assert totals.total == 20.7
        assert totals.discounted_total == 10.7
        assert totals.total_products == 3
        assert totals.total_quantity == 6
        assert totals.discounted_total <= totals.total

    def test_is_deterministic(self):
        items = [CartLineItem(product_id=1, title="A", quantity=1, unit_price=1.1, total=1.1, discounted_total=1.0)]

        assert PricingEngine.price_cart(items) == PricingEngine.price_cart(items)


def test_round_money_rejects_non_finite_values():
    with pytest.raises(InternalComputationError):
        round_money(float("inf"))
    with pytest.raises(InternalComputationError):
        round_money(float("nan"))


@pytest.mark.asyncio
async def test_overflowing_price_is_a_computation_error():
    catalog = LocalCatalog([Product(id=7, title="Huge", price=1e308)])

    with pytest.raises(InternalComputationError):
        await PricingEngine(catalog).price_item(7, 99)
