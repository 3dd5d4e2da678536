# backend/cart_engine/services/cart_store.py
"""
Almacén de carritos en memoria.

Este servicio es el dueño de los registros de carrito: alta, lectura,
listado por usuario, actualización (merge o reemplazo) y borrado lógico.
Delega el cálculo de importes en el PricingEngine.

Modelo de concurrencia:
- Las mutaciones de un mismo carrito se serializan con un asyncio.Lock por id,
  adquirido con timeout; si vence se lanza CartBusyError (reintentable).
- Las consultas al catálogo se hacen antes de tomar el lock.
- Cada mutación construye un Cart nuevo y lo sustituye de una vez, así que
  los lectores nunca ven totales a medio recalcular.

No hay singleton: la aplicación crea una instancia y la guarda en app.state.
"""

import asyncio
import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, Iterable, List, Optional, Sequence, Tuple

from cart_engine.core.exceptions import CartBusyError, CartNotFoundError, InternalComputationError
from cart_engine.models.cart_model import Cart, CartLineItem
from cart_engine.services.pricing_service import PricingEngine

logger = logging.getLogger(__name__)

TOTAL_TOLERANCE = 0.01


def assert_invariants(cart: Cart) -> None:
    """Comprueba la consistencia de un carrito; un fallo es un error interno."""
    product_ids = [item.product_id for item in cart.items]
    if len(product_ids) != len(set(product_ids)):
        raise InternalComputationError(f"Cart {cart.id} has duplicated product lines")
    if cart.total_products != len(cart.items):
        raise InternalComputationError(f"Cart {cart.id}: totalProducts does not match its lines")
    if cart.total_quantity != sum(item.quantity for item in cart.items):
        raise InternalComputationError(f"Cart {cart.id}: totalQuantity does not match its lines")
    if not math.isclose(cart.total, sum(item.total for item in cart.items), abs_tol=TOTAL_TOLERANCE):
        raise InternalComputationError(f"Cart {cart.id}: total does not match its lines")
    if cart.discounted_total > cart.total + 1e-9:
        raise InternalComputationError(f"Cart {cart.id}: discountedTotal exceeds total")


def merge_items(existing: Sequence[CartLineItem], incoming: Sequence[CartLineItem]) -> List[CartLineItem]:
    """
    Une las líneas nuevas con las existentes.

    Una línea con el mismo producto se sustituye en su posición (cantidad
    reemplazada, no sumada); las nuevas se añaden al final y las no
    mencionadas se conservan.
    """
    merged = list(existing)
    positions = {item.product_id: index for index, item in enumerate(merged)}
    for line in incoming:
        if line.product_id in positions:
            merged[positions[line.product_id]] = line
        else:
            positions[line.product_id] = len(merged)
            merged.append(line)
    return merged


class CartStore:
    """Registros de carrito con mutaciones serializadas por id."""

    def __init__(self, pricing: PricingEngine, lock_timeout: float = 5.0):
        self.pricing = pricing
        self.lock_timeout = lock_timeout
        self._carts: Dict[int, Cart] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._carts)

    # ========================================
    # OPERACIONES DE LECTURA (READ)
    # ========================================

    async def get(self, cart_id: int) -> Cart:
        """Devuelve el carrito, incluidos los borrados (con is_deleted=True)."""
        cart = self._carts.get(cart_id)
        if cart is None:
            raise CartNotFoundError(cart_id)
        return cart.snapshot()

    async def list_by_user(self, user_id: int) -> List[Cart]:
        """Carritos activos del usuario en orden de inserción."""
        return [c.snapshot() for c in self._carts.values() if c.user_id == user_id and not c.is_deleted]

    async def list_carts(self, limit: int = 30, skip: int = 0) -> Tuple[List[Cart], int]:
        """Página de carritos activos. limit=0 devuelve todos desde skip."""
        active = [c for c in self._carts.values() if not c.is_deleted]
        page = active[skip:] if limit == 0 else active[skip:skip + limit]
        return [c.snapshot() for c in page], len(active)

    # ========================================
    # OPERACIONES DE ESCRITURA
    # ========================================

    async def create(self, user_id: int, entries: Sequence[Tuple[int, int]]) -> Cart:
        """Valora las líneas, asigna un id nuevo y guarda el carrito."""
        items = await self.pricing.price_items(entries)
        cart_id = self._allocate_id()
        cart = Cart(id=cart_id, user_id=user_id, items=items, totals=self.pricing.price_cart(items))
        assert_invariants(cart)
        self._carts[cart_id] = cart
        logger.info(
            f"🆕 CARRITO: Creado carrito {cart_id} para usuario {user_id} "
            f"({cart.total_products} productos, {cart.total_quantity} unidades)"
        )
        return cart.snapshot()

    async def update(self, cart_id: int, entries: Sequence[Tuple[int, int]], merge: bool = True) -> Cart:
        """
        Actualiza las líneas de un carrito activo.

        merge=True une las líneas nuevas con las existentes; merge=False
        sustituye todas las líneas por las recibidas.
        """
        # Falla pronto, sin llamar al catálogo, si el carrito no existe
        self._require_active(cart_id)
        incoming = await self.pricing.price_items(entries)

        async with self._locked(cart_id):
            current = self._require_active(cart_id)
            items = merge_items(current.items, incoming) if merge else incoming
            updated = current.with_items(items, self.pricing.price_cart(items))
            assert_invariants(updated)
            self._carts[cart_id] = updated

        mode = "merge" if merge else "reemplazo"
        logger.info(
            f"🔄 CARRITO: Actualizado carrito {cart_id} ({mode}) - "
            f"{updated.total_products} productos, {updated.total_quantity} unidades, total {updated.total}"
        )
        return updated.snapshot()

    async def soft_delete(self, cart_id: int) -> Cart:
        """Marca el carrito como borrado conservando líneas y totales."""
        self._require_active(cart_id)

        async with self._locked(cart_id):
            current = self._require_active(cart_id)
            deleted = current.mark_deleted(datetime.now(timezone.utc))
            self._carts[cart_id] = deleted

        # Estado terminal: el lock se descarta
        self._locks.pop(cart_id, None)
        logger.info(f"🗑️ CARRITO: Borrado lógico del carrito {cart_id}")
        return deleted.snapshot()

    def restore(self, carts: Iterable[Cart]) -> None:
        """
        Carga carritos existentes conservando su id y avanza el contador.

        El lote se comprueba entero antes de insertar nada: un id repetido o un
        carrito incoherente deja el almacén tal como estaba.
        """
        batch = list(carts)
        seen = set()
        for cart in batch:
            if cart.id in self._carts or cart.id in seen:
                raise ValueError(f"Cart id {cart.id} already exists")
            seen.add(cart.id)
            assert_invariants(cart)

        for cart in batch:
            self._carts[cart.id] = cart
            self._next_id = max(self._next_id, cart.id + 1)

    # ========================================
    # AUXILIARES
    # ========================================

    def _allocate_id(self) -> int:
        cart_id = self._next_id
        self._next_id += 1
        return cart_id

    def _require_active(self, cart_id: int) -> Cart:
        cart: Optional[Cart] = self._carts.get(cart_id)
        if cart is None or cart.is_deleted:
            raise CartNotFoundError(cart_id)
        return cart

    @asynccontextmanager
    async def _locked(self, cart_id: int) -> AsyncIterator[None]:
        # Sólo los carritos activos tienen lock
        self._require_active(cart_id)
        lock = self._locks.get(cart_id)
        if lock is None:
            lock = self._locks[cart_id] = asyncio.Lock()
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.lock_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"⚠️ CARRITO: Timeout esperando el lock del carrito {cart_id}")
            raise CartBusyError(cart_id)
        try:
            yield
        finally:
            lock.release()
