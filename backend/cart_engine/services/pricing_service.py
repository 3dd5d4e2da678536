# backend/cart_engine/services/pricing_service.py
"""
Motor de precios del carrito.

Calcula los importes de cada línea a partir del catálogo y agrega los
totales del carrito. La agregación es una función pura y debe ejecutarse
después de cada cambio estructural de las líneas.
"""

import asyncio
import logging
import math
from typing import Iterable, List, Sequence, Tuple

from cart_engine.core.exceptions import InternalComputationError, ProductNotFoundError
from cart_engine.models.cart_model import CartLineItem, CartTotals
from cart_engine.services.catalog_service import Catalog

logger = logging.getLogger(__name__)


def round_money(value: float) -> float:
    """Redondea a céntimos y rechaza resultados no finitos."""
    if not math.isfinite(value):
        raise InternalComputationError(f"Non-finite monetary value: {value!r}")
    return round(value, 2)


class PricingEngine:
    """Precio por línea y agregados por carrito."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    async def price_item(self, product_id: int, quantity: int) -> CartLineItem:
        """Resuelve el producto en el catálogo y devuelve la línea valorada."""
        product = await self.catalog.get_product(product_id)
        if product is None:
            logger.warning(f"⚠️ PRECIOS: Producto {product_id} no existe en el catálogo")
            raise ProductNotFoundError(product_id)

        total = round_money(product.price * quantity)
        discount = min(max(product.discount_percentage, 0.0), 100.0)
        discounted_total = round_money(total * (1 - discount / 100))
        # El descuento nunca puede hacer la línea más cara ni negativa
        discounted_total = min(max(discounted_total, 0.0), total)

        return CartLineItem(
            product_id=product.id,
            title=product.title,
            quantity=quantity,
            unit_price=product.price,
            total=total,
            discounted_total=discounted_total,
            discount_percentage=discount,
            thumbnail=product.thumbnail,
        )

    async def price_items(self, entries: Sequence[Tuple[int, int]]) -> List[CartLineItem]:
        """
        Valora varias líneas en paralelo, conservando el orden de entrada.

        Si una consulta falla se cancelan las demás antes de propagar el error.
        """
        if not entries:
            return []
        tasks = [asyncio.ensure_future(self.price_item(pid, qty)) for pid, qty in entries]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            # Recoge los resultados para que ninguna excepción quede sin recuperar
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    @staticmethod
    def price_cart(items: Iterable[CartLineItem]) -> CartTotals:
        """Agrega total, total con descuento, productos distintos y unidades."""
        items = list(items)
        total = round_money(sum(item.total for item in items))
        discounted_total = round_money(sum(item.discounted_total for item in items))
        return CartTotals(
            total=total,
            discounted_total=min(discounted_total, total),
            total_products=len(items),
            total_quantity=sum(item.quantity for item in items),
        )
