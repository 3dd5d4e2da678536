# backend/cart_engine/services/catalog_service.py
"""
Adaptadores del catálogo de productos.

El catálogo es un colaborador externo: dado un id devuelve título, precio,
descuento y miniatura. Hay dos implementaciones con la misma interfaz:

- LocalCatalog: lee un fichero JSON con la forma de DummyJSON (/products).
- RemoteCatalog: consulta una API compatible con DummyJSON mediante httpx.

Ambas devuelven None cuando el id no existe; la decisión de rechazar la
petición la toma el motor de precios.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from cart_engine.core.config import Settings
from cart_engine.core.exceptions import CatalogUnavailableError
from cart_engine.models.cart_model import Product
from cart_engine.schemas.product_schema import CatalogProduct

logger = logging.getLogger(__name__)


def product_from_payload(data: Any) -> Product:
    """Valida un objeto JSON del catálogo y lo convierte en Product."""
    return CatalogProduct.model_validate(data).to_domain()


class Catalog(ABC):
    """Interfaz común de los catálogos."""

    @abstractmethod
    async def get_product(self, product_id: int) -> Optional[Product]:
        """Devuelve el producto o None si el id no existe."""

    async def close(self) -> None:
        return None


class LocalCatalog(Catalog):
    """Catálogo en memoria, cargado desde una lista de productos."""

    def __init__(self, products: Iterable[Product]):
        self._products: Dict[int, Product] = {p.id: p for p in products}

    @classmethod
    def from_file(cls, path: Path) -> "LocalCatalog":
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
        # Acepta tanto la lista directa como el sobre {"products": [...]} de DummyJSON
        entries = raw["products"] if isinstance(raw, dict) else raw
        catalog = cls(product_from_payload(entry) for entry in entries)
        logger.info(f"📦 CATÁLOGO: {len(catalog)} productos cargados desde '{path}'")
        return catalog

    def __len__(self) -> int:
        return len(self._products)

    async def get_product(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)


class RemoteCatalog(Catalog):
    """Catálogo remoto con la API de productos de DummyJSON."""

    def __init__(self, base_url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def get_product(self, product_id: int) -> Optional[Product]:
        try:
            response = await self._client.get(f"/products/{product_id}")
        except httpx.HTTPError as e:
            logger.error(f"❌ CATÁLOGO: Error consultando producto {product_id}: {e}")
            raise CatalogUnavailableError(f"Catalog request failed for product '{product_id}'") from e

        if response.status_code == 404:
            logger.warning(f"⚠️ CATÁLOGO: Producto {product_id} no encontrado")
            return None
        if response.status_code >= 400:
            logger.error(f"❌ CATÁLOGO: HTTP {response.status_code} para producto {product_id} - {response.text}")
            raise CatalogUnavailableError(f"Catalog returned HTTP {response.status_code} for product '{product_id}'")

        try:
            return product_from_payload(response.json())
        except (SchemaValidationError, ValueError) as e:
            logger.error(f"❌ CATÁLOGO: Respuesta inválida para producto {product_id}: {e}")
            raise CatalogUnavailableError(f"Catalog returned an invalid product '{product_id}'") from e

    async def close(self) -> None:
        await self._client.aclose()


def build_catalog(settings: Settings) -> Catalog:
    """Crea el catálogo configurado en CATALOG_BACKEND."""
    backend = settings.CATALOG_BACKEND.lower()
    if backend == "remote":
        logger.info(f"🌐 CATÁLOGO: Usando catálogo remoto en {settings.CATALOG_URL}")
        return RemoteCatalog(settings.CATALOG_URL, timeout=settings.CATALOG_TIMEOUT_SECONDS)
    if backend == "local":
        return LocalCatalog.from_file(settings.CATALOG_FILE)
    raise ValueError(f"CATALOG_BACKEND desconocido: {settings.CATALOG_BACKEND!r}")
