# backend/cart_engine/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura e inicializa la aplicación completa: servicios del
carrito, rutas, manejo de errores y ciclo de vida.

Características principales:
- Factoría create_app() para construir aplicaciones aisladas (tests incluidos)
- Un CartStore por aplicación, guardado en app.state
- Errores de dominio serializados como {"kind", "message"}
- Carritos de demostración precargados al arrancar (SEED_CARTS)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cart_engine.api.v1.api_router import api_router_v1
from cart_engine.core.config import Settings, settings as default_settings
from cart_engine.core.exceptions import CartEngineError, MalformedRequestError
from cart_engine.core.logging_config import setup_logging
from cart_engine.services.cart_store import CartStore
from cart_engine.services.catalog_service import Catalog, build_catalog
from cart_engine.services.pricing_service import PricingEngine
from cart_engine.services.seed_service import read_seed_file, seed_carts
from cart_engine.services.validation_service import ValidationEngine

logger = logging.getLogger(__name__)


# ========================================
# CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Precarga los carritos de demostración y cierra el catálogo al terminar."""
    settings: Settings = app.state.settings
    if settings.SEED_CARTS:
        try:
            entries = read_seed_file(settings.SEED_CARTS_FILE)
            await seed_carts(app.state.cart_store, entries, app.state.validator)
        except (OSError, KeyError, ValueError, CartEngineError) as e:
            # Sin datos de demo la API sigue siendo funcional
            logger.error(f"❌ SEED: No se pudieron precargar carritos desde '{settings.SEED_CARTS_FILE}': {e}")
    else:
        logger.info("ℹ️  SEED_CARTS desactivado, el almacén arranca vacío")

    logger.info(f"✅ {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} lista")
    yield
    await app.state.catalog.close()


# ========================================
# MANEJO DE ERRORES
# ========================================

async def cart_engine_error_handler(request: Request, exc: CartEngineError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"❌ ERROR {exc.kind} en {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"⚠️ {exc.kind} en {request.method} {request.url.path}: {exc.message}")

    headers = None
    retry_after = getattr(exc, "retry_after_seconds", None)
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """JSON inválido o parámetros de query con tipo incorrecto."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    error = MalformedRequestError(f"Malformed request: {details}" if details else "Malformed request")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_dict())


# ========================================
# FACTORÍA DE LA APLICACIÓN
# ========================================

def create_app(settings: Optional[Settings] = None, catalog: Optional[Catalog] = None) -> FastAPI:
    """
    Construye la aplicación con sus propios servicios.

    Args:
        settings: Configuración a usar; por defecto la cargada del entorno
        catalog: Catálogo a inyectar; por defecto el de CATALOG_BACKEND
    """
    settings = settings or default_settings
    setup_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description="API de carritos de compra con actualizaciones merge/reemplazo y borrado lógico",
        lifespan=lifespan,
    )

    if catalog is None:
        catalog = build_catalog(settings)
    pricing = PricingEngine(catalog)
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.validator = ValidationEngine(max_quantity=settings.MAX_QUANTITY)
    app.state.cart_store = CartStore(pricing, lock_timeout=settings.CART_LOCK_TIMEOUT_SECONDS)

    app.add_exception_handler(CartEngineError, cart_engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(api_router_v1, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    async def read_root():
        """Mensaje de bienvenida con nombre y versión del servicio."""
        return {"message": f"Bienvenido a {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok", "carts": len(app.state.cart_store)}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
