# backend/cart_engine/services/validation_service.py
"""
Motor de validación de peticiones de carrito.

Recibe el cuerpo JSON tal cual llega y devuelve una petición normalizada
(CartCreate / CartUpdate) o lanza un ValidationError con el tipo concreto.
Es una función pura de la petición: nunca consulta el almacén ni el catálogo.

Las reglas están declaradas en los esquemas Pydantic de cart_schema; aquí
sólo se traduce el primer error de Pydantic al error del dominio:
- cualquier error en userId -> InvalidUserId
- products vacío al crear -> EmptyProductList
- quantity <= 0 -> InvalidQuantity, quantity > máximo -> QuantityOutOfRange
- el resto (tipos, campos ausentes, merge no booleano) -> MalformedRequest
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from cart_engine.core.exceptions import (
    CartNotFoundError,
    EmptyProductListError,
    InvalidQuantityError,
    InvalidUserIdError,
    MalformedRequestError,
    QuantityOutOfRangeError,
    ValidationError,
)
from cart_engine.schemas.cart_schema import DEFAULT_MAX_QUANTITY, CartCreate, CartUpdate, reject_bool

PositiveId = TypeAdapter(Annotated[int, BeforeValidator(reject_bool), Field(gt=0)])

_QUANTITY_ERRORS = {
    "invalid_quantity": InvalidQuantityError,
    "quantity_out_of_range": QuantityOutOfRangeError,
}


def to_domain_error(exc: SchemaValidationError) -> ValidationError:
    """Traduce el primer error de Pydantic (loc + type) al error del dominio."""
    error = exc.errors()[0]
    loc = tuple(error.get("loc", ()))
    error_type = error.get("type", "")
    location = ".".join(str(part) for part in loc) or "body"

    if loc[:1] == ("userId",):
        if error_type == "missing":
            return InvalidUserIdError("userId is required")
        return InvalidUserIdError(f"Invalid userId: {error['msg']}")
    if loc == ("products",) and error_type == "too_short":
        return EmptyProductListError("products must contain at least one item")
    if error_type in _QUANTITY_ERRORS:
        return _QUANTITY_ERRORS[error_type](error["msg"])
    if not loc and error_type == "model_type":
        return MalformedRequestError("Request body must be a JSON object")
    return MalformedRequestError(f"{location}: {error['msg']}")


class ValidationEngine:
    """Validación y normalización de las peticiones del carrito."""

    def __init__(self, max_quantity: int = DEFAULT_MAX_QUANTITY):
        self.max_quantity = max_quantity

    # ========================================
    # IDENTIFICADORES
    # ========================================

    def validate_user_id(self, value: Any) -> int:
        try:
            return PositiveId.validate_python(value)
        except SchemaValidationError as e:
            raise InvalidUserIdError(f"Invalid user id '{value}': must be a positive integer") from e

    def validate_cart_id(self, value: Any) -> int:
        """Un id de carrito que no es entero positivo no puede existir."""
        try:
            return PositiveId.validate_python(value)
        except SchemaValidationError as e:
            raise CartNotFoundError(value) from e

    # ========================================
    # CUERPOS DE PETICIÓN
    # ========================================

    def validate_create(self, payload: Any) -> CartCreate:
        return self._validate(CartCreate, payload)

    def validate_update(self, payload: Any) -> CartUpdate:
        return self._validate(CartUpdate, payload)

    def _validate(self, schema: type[BaseModel], payload: Any):
        try:
            return schema.model_validate(payload, context={"max_quantity": self.max_quantity})
        except SchemaValidationError as e:
            raise to_domain_error(e) from e
