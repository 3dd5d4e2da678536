# backend/cart_engine/core/exceptions.py
"""
Excepciones de dominio del motor de carritos.

Cada excepción lleva un `kind` legible por máquina y el código HTTP con el
que la fachada la expone. Los servicios las lanzan; main.py registra un único
handler que las serializa como {"kind": ..., "message": ...}.
"""

from typing import Optional


class CartEngineError(Exception):
    """Base de todos los errores del motor de carritos."""
    kind: str = "CartEngineError"
    status_code: int = 500

    def __init__(self, message: str, *, kind: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


# ========================================
# ERRORES DE VALIDACIÓN (400)
# ========================================

class ValidationError(CartEngineError):
    """Petición rechazada antes de tocar el estado."""
    kind = "ValidationError"
    status_code = 400


class InvalidUserIdError(ValidationError):
    kind = "InvalidUserId"


class EmptyProductListError(ValidationError):
    kind = "EmptyProductList"


class InvalidQuantityError(ValidationError):
    kind = "InvalidQuantity"


class QuantityOutOfRangeError(ValidationError):
    kind = "QuantityOutOfRange"


class MalformedRequestError(ValidationError):
    kind = "MalformedRequest"


class ProductNotFoundError(ValidationError):
    """El catálogo no resuelve el id; se rechaza la operación completa."""
    kind = "ProductNotFound"

    def __init__(self, product_id: int):
        super().__init__(f"Product with id '{product_id}' not found")
        self.product_id = product_id


# ========================================
# ERRORES DE RECURSO (404)
# ========================================

class CartNotFoundError(CartEngineError):
    kind = "CartNotFound"
    status_code = 404

    def __init__(self, cart_id):
        super().__init__(f"Cart with id '{cart_id}' not found")
        self.cart_id = cart_id


# ========================================
# ERRORES REINTENTABLES (503)
# ========================================

class CartBusyError(CartEngineError):
    """No se obtuvo el lock del carrito dentro del timeout."""
    kind = "CartBusy"
    status_code = 503
    retry_after_seconds = 1

    def __init__(self, cart_id):
        super().__init__(f"Cart with id '{cart_id}' is being modified, retry later")
        self.cart_id = cart_id


class CatalogUnavailableError(CartEngineError):
    kind = "CatalogUnavailable"
    status_code = 503
    retry_after_seconds = 5


# ========================================
# ERRORES INTERNOS (500)
# ========================================

class InternalComputationError(CartEngineError):
    """Cálculo monetario inválido o invariante roto. Nunca se corrige en silencio."""
    kind = "InternalComputationError"
    status_code = 500
