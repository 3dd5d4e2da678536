# backend/cart_engine/api/v1/api_router.py
"""
Este archivo contiene el router principal de la API.

Se encarga de registrar y configurar los routers por dominio.
"""

from fastapi import APIRouter

from cart_engine.api.v1.endpoints import carts

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL
# ========================================

api_router_v1 = APIRouter()

# ROUTER DE CARRITOS
# Alta, consulta, listado, actualización (merge/reemplazo) y borrado lógico
api_router_v1.include_router(
    carts.router,
    prefix="/carts",
    tags=["Carts"]
)
