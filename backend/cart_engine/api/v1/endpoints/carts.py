# backend/cart_engine/api/v1/endpoints/carts.py
"""
Endpoints REST del carrito de compras.

Esta capa sólo traduce peticiones HTTP a operaciones del CartStore y
serializa el resultado. Los errores de dominio se propagan como excepciones
y los convierte en respuestas el handler registrado en main.py.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from cart_engine.api import deps
from cart_engine.core.config import Settings
from cart_engine.schemas.cart_schema import CartListResponse, CartResponse, ErrorResponse
from cart_engine.services.cart_store import CartStore
from cart_engine.services.validation_service import ValidationEngine

logger = logging.getLogger(__name__)
router = APIRouter()

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


@router.get("", response_model=CartListResponse, response_model_exclude_none=True)
async def list_carts(
    limit: Optional[int] = Query(default=None, ge=0),
    skip: int = Query(default=0, ge=0),
    store: CartStore = Depends(deps.get_cart_store),
    settings: Settings = Depends(deps.get_settings),
) -> CartListResponse:
    """Lista paginada de carritos activos. limit=0 devuelve todos."""
    if limit is None:
        limit = settings.DEFAULT_PAGE_LIMIT
    carts, total = await store.list_carts(limit=limit, skip=skip)
    logger.debug(f"📋 CARRITOS: Listando skip={skip}, limit={limit} - {len(carts)} de {total}")
    return CartListResponse(
        carts=[CartResponse.from_domain(c) for c in carts],
        total=total,
        limit=len(carts) if limit == 0 else limit,
        skip=skip,
    )


@router.post(
    "/add",
    response_model=CartResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
async def add_cart(
    payload: Any = Body(default=None, description="{userId, products: [{id, quantity}]}"),
    store: CartStore = Depends(deps.get_cart_store),
    validator: ValidationEngine = Depends(deps.get_validator),
) -> CartResponse:
    """Crea un carrito nuevo para un usuario con al menos un producto."""
    request = validator.validate_create(payload)
    cart = await store.create(request.user_id, request.entries())
    return CartResponse.from_domain(cart)


@router.get("/user/{user_id}", response_model=CartListResponse, response_model_exclude_none=True, responses=BAD_REQUEST)
async def list_user_carts(
    user_id: str,
    store: CartStore = Depends(deps.get_cart_store),
    validator: ValidationEngine = Depends(deps.get_validator),
) -> CartListResponse:
    """Carritos activos de un usuario, en orden de creación."""
    carts = await store.list_by_user(validator.validate_user_id(user_id))
    return CartListResponse(
        carts=[CartResponse.from_domain(c) for c in carts],
        total=len(carts),
        limit=len(carts),
        skip=0,
    )


@router.get("/{cart_id}", response_model=CartResponse, response_model_exclude_none=True, responses=NOT_FOUND)
async def read_cart(
    cart_id: str,
    store: CartStore = Depends(deps.get_cart_store),
    validator: ValidationEngine = Depends(deps.get_validator),
) -> CartResponse:
    """Obtiene un carrito; los borrados se devuelven con isDeleted=true."""
    cart = await store.get(validator.validate_cart_id(cart_id))
    return CartResponse.from_domain(cart)


@router.api_route(
    "/{cart_id}",
    methods=["PUT", "PATCH"],
    response_model=CartResponse,
    response_model_exclude_none=True,
    responses={**NOT_FOUND, **BAD_REQUEST},
)
async def update_cart(
    cart_id: str,
    payload: Any = Body(default=None, description="{merge?, products: [{id, quantity}]}"),
    store: CartStore = Depends(deps.get_cart_store),
    validator: ValidationEngine = Depends(deps.get_validator),
) -> CartResponse:
    """Actualiza las líneas de un carrito con merge (por defecto) o reemplazo."""
    target_id = validator.validate_cart_id(cart_id)
    request = validator.validate_update(payload)
    cart = await store.update(target_id, request.entries(), merge=request.merge)
    return CartResponse.from_domain(cart)


@router.delete("/{cart_id}", response_model=CartResponse, response_model_exclude_none=True, responses=NOT_FOUND)
async def delete_cart(
    cart_id: str,
    store: CartStore = Depends(deps.get_cart_store),
    validator: ValidationEngine = Depends(deps.get_validator),
) -> CartResponse:
    """Borrado lógico: devuelve el carrito completo con isDeleted y deletedOn."""
    cart = await store.soft_delete(validator.validate_cart_id(cart_id))
    return CartResponse.from_domain(cart)
