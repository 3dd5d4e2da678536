# backend/cart_engine/api/deps.py
"""
Módulo de dependencias para FastAPI.

Los servicios viven en app.state (los crea create_app), de modo que cada
aplicación, incluidas las de los tests, tiene su propio almacén de carritos.
"""

from fastapi import Request

from cart_engine.core.config import Settings
from cart_engine.services.cart_store import CartStore
from cart_engine.services.validation_service import ValidationEngine


def get_settings(request: Request) -> Settings:
    """Dependencia de FastAPI para obtener la configuración de la aplicación."""
    return request.app.state.settings


def get_cart_store(request: Request) -> CartStore:
    """Dependencia de FastAPI para obtener el almacén de carritos."""
    return request.app.state.cart_store


def get_validator(request: Request) -> ValidationEngine:
    return request.app.state.validator
