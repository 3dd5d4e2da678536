# backend/cart_engine/schemas/product_schema.py
"""
Esquema Pydantic de un producto tal como lo publica el catálogo.

Sigue la forma de DummyJSON (/products/{id}); los campos que el carrito no
usa se ignoran.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cart_engine.models.cart_model import Product


class CatalogProduct(BaseModel):
    """Producto del catálogo: id, título, precio, descuento y miniatura."""
    id: int = Field(..., gt=0)
    title: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    discount_percentage: float = Field(0.0, alias="discountPercentage")
    thumbnail: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('discount_percentage', mode='before')
    @classmethod
    def validate_discount(cls, v):
        # Algunos productos publican el descuento como null
        return 0.0 if v is None else v

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            title=self.title,
            price=self.price,
            discount_percentage=self.discount_percentage,
            thumbnail=self.thumbnail,
        )
