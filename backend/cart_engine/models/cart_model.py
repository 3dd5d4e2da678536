# backend/cart_engine/models/cart_model.py
"""
Modelos de dominio del carrito.

Son dataclasses en memoria: el motor no persiste más allá del proceso.
Los valores monetarios se guardan ya redondeados a 2 decimales.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class Product:
    """Producto tal como lo devuelve el catálogo. Inmutable para el motor."""
    id: int
    title: str
    price: float
    discount_percentage: float = 0.0
    thumbnail: Optional[str] = None


@dataclass(frozen=True)
class CartLineItem:
    """Línea del carrito con precio fotografiado al insertarla."""
    product_id: int
    title: str
    quantity: int
    unit_price: float
    total: float
    discounted_total: float
    discount_percentage: float = 0.0
    thumbnail: Optional[str] = None


@dataclass(frozen=True)
class CartTotals:
    """Campos agregados de un carrito."""
    total: float = 0.0
    discounted_total: float = 0.0
    total_products: int = 0
    total_quantity: int = 0


@dataclass
class Cart:
    """
    Carrito de un usuario.

    El almacén nunca muta un Cart publicado: cada mutación construye uno
    nuevo con with_items()/mark_deleted() y lo sustituye de forma atómica.
    """
    id: int
    user_id: int
    items: List[CartLineItem] = field(default_factory=list)
    totals: CartTotals = field(default_factory=CartTotals)
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None

    @property
    def total(self) -> float:
        return self.totals.total

    @property
    def discounted_total(self) -> float:
        return self.totals.discounted_total

    @property
    def total_products(self) -> int:
        return self.totals.total_products

    @property
    def total_quantity(self) -> int:
        return self.totals.total_quantity

    def find_item(self, product_id: int) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def with_items(self, items: List[CartLineItem], totals: CartTotals) -> "Cart":
        return replace(self, items=list(items), totals=totals)

    def mark_deleted(self, deleted_at: datetime) -> "Cart":
        return replace(self, items=list(self.items), is_deleted=True, deleted_at=deleted_at)

    def snapshot(self) -> "Cart":
        """Copia independiente para entregar a los lectores."""
        return replace(self, items=list(self.items))
