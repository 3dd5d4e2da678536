# backend/cart_engine/services/seed_service.py
"""
Carga de carritos de demostración al arrancar.

El fichero sigue la forma de DummyJSON: {"carts": [{id, userId, products: [{id, quantity}]}]}.
Los precios no se leen del fichero: cada línea se valora contra el catálogo
configurado, igual que en un alta normal.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from cart_engine.models.cart_model import Cart
from cart_engine.services.cart_store import CartStore
from cart_engine.services.validation_service import PositiveId, ValidationEngine

logger = logging.getLogger(__name__)


def read_seed_file(path: Path) -> List[Dict[str, Any]]:
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    return raw["carts"] if isinstance(raw, dict) else raw


async def seed_carts(store: CartStore, entries: List[Dict[str, Any]], validator: ValidationEngine) -> int:
    """Valida, valora y restaura cada carrito conservando su id. Devuelve cuántos cargó."""
    carts = []
    for entry in entries:
        request = validator.validate_create(entry)
        items = await store.pricing.price_items(request.entries())
        carts.append(
            Cart(
                id=PositiveId.validate_python(entry.get("id")),
                user_id=request.user_id,
                items=items,
                totals=store.pricing.price_cart(items),
            )
        )
    store.restore(carts)
    logger.info(f"🌱 SEED: {len(carts)} carritos precargados")
    return len(carts)
