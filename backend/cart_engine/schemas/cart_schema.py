# backend/cart_engine/schemas/cart_schema.py
"""
Esquemas Pydantic para la API de carritos.

Las reglas de las peticiones viven en CartCreate/CartUpdate; el
ValidationEngine sólo traduce los errores de Pydantic a los tipos de error
del dominio. Las respuestas usan camelCase, que es el contrato JSON que
consumen los clientes existentes.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from cart_engine.models.cart_model import Cart, CartLineItem

DEFAULT_MAX_QUANTITY = 99


def reject_bool(value: Any) -> Any:
    """JSON true/false no son enteros aunque Python los trate así."""
    if isinstance(value, bool):
        raise PydanticCustomError("int_type", "Input should be a valid integer, not a boolean")
    return value


# ========================================
# ESQUEMAS DE PETICIÓN
# ========================================

class CartProductIn(BaseModel):
    """Una línea pedida: id de producto y cantidad."""
    id: int = Field(..., gt=0, description="ID del producto en el catálogo")
    quantity: int = Field(..., description="Unidades pedidas")

    @field_validator('id', 'quantity', mode='before')
    @classmethod
    def validate_not_bool(cls, v):
        return reject_bool(v)

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v: int, info: ValidationInfo) -> int:
        product_id = info.data.get('id')
        if v <= 0:
            raise PydanticCustomError(
                "invalid_quantity",
                "Invalid quantity {quantity} for product {product_id}: must be at least 1",
                {"quantity": v, "product_id": product_id},
            )
        # El máximo es configurable y llega en el contexto de validación
        max_quantity = (info.context or {}).get('max_quantity', DEFAULT_MAX_QUANTITY)
        if v > max_quantity:
            raise PydanticCustomError(
                "quantity_out_of_range",
                "Quantity {quantity} for product {product_id} exceeds the maximum of {max_quantity}",
                {"quantity": v, "product_id": product_id, "max_quantity": max_quantity},
            )
        return v


def collapse_duplicates(products: List[CartProductIn]) -> List[CartProductIn]:
    """Ids repetidos en la misma petición: gana la última aparición."""
    by_id: Dict[int, CartProductIn] = {}
    for product in products:
        by_id.pop(product.id, None)
        by_id[product.id] = product
    return list(by_id.values())


class CartCreate(BaseModel):
    """Petición de alta: usuario y al menos una línea."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., gt=0, alias="userId", description="ID del usuario propietario")
    products: List[CartProductIn] = Field(..., min_length=1, description="Líneas del carrito")

    @field_validator('user_id', mode='before')
    @classmethod
    def validate_user_id(cls, v):
        return reject_bool(v)

    @field_validator('products')
    @classmethod
    def validate_products(cls, v):
        return collapse_duplicates(v)

    def entries(self):
        return [(p.id, p.quantity) for p in self.products]


class CartUpdate(BaseModel):
    """Petición de actualización. merge=True por defecto; products puede venir vacío."""
    merge: StrictBool = Field(True, description="True fusiona con las líneas existentes, False las reemplaza")
    products: List[CartProductIn] = Field(..., description="Líneas a fusionar o a dejar")

    @field_validator('merge', mode='before')
    @classmethod
    def validate_merge(cls, v):
        return True if v is None else v

    @field_validator('products')
    @classmethod
    def validate_products(cls, v):
        return collapse_duplicates(v)

    def entries(self):
        return [(p.id, p.quantity) for p in self.products]


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CartProductResponse(_CamelModel):
    """Línea de carrito tal como se devuelve al cliente."""
    id: int
    title: str
    price: float
    quantity: int
    total: float
    discount_percentage: float = Field(0.0, alias="discountPercentage")
    discounted_total: float = Field(..., alias="discountedTotal")
    thumbnail: Optional[str] = None

    @classmethod
    def from_domain(cls, item: CartLineItem) -> "CartProductResponse":
        return cls(
            id=item.product_id,
            title=item.title,
            price=item.unit_price,
            quantity=item.quantity,
            total=item.total,
            discount_percentage=item.discount_percentage,
            discounted_total=item.discounted_total,
            thumbnail=item.thumbnail,
        )


class CartResponse(_CamelModel):
    """Estado completo de un carrito."""
    id: int
    user_id: int = Field(..., alias="userId")
    products: List[CartProductResponse]
    total: float
    discounted_total: float = Field(..., alias="discountedTotal")
    total_products: int = Field(..., alias="totalProducts")
    total_quantity: int = Field(..., alias="totalQuantity")
    is_deleted: bool = Field(False, alias="isDeleted")
    deleted_on: Optional[datetime] = Field(None, alias="deletedOn")

    @classmethod
    def from_domain(cls, cart: Cart) -> "CartResponse":
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            products=[CartProductResponse.from_domain(item) for item in cart.items],
            total=cart.total,
            discounted_total=cart.discounted_total,
            total_products=cart.total_products,
            total_quantity=cart.total_quantity,
            is_deleted=cart.is_deleted,
            deleted_on=cart.deleted_at,
        )


class CartListResponse(BaseModel):
    """Página de carritos: {carts, total, limit, skip}."""
    carts: List[CartResponse]
    total: int
    limit: int
    skip: int


class ErrorResponse(BaseModel):
    """Cuerpo de error: tipo legible por máquina y mensaje."""
    kind: str
    message: str
