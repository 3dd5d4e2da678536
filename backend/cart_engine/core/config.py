# backend/cart_engine/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path

# Apunta al directorio del paquete 'cart_engine/'
PACKAGE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = PACKAGE_DIR / "data"

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables desde el entorno o .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    PROJECT_NAME: str = "Cart Engine API"
    PROJECT_VERSION: str = "0.1.0"
    # Prefijo de las rutas del carrito; vacío expone /carts en la raíz
    API_PREFIX: str = ""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE_PATH: Optional[str] = None

    # Catálogo de productos: "local" (fichero JSON) o "remote" (API compatible con DummyJSON)
    CATALOG_BACKEND: str = "local"
    CATALOG_URL: str = "https://dummyjson.com"
    CATALOG_TIMEOUT_SECONDS: float = 10.0
    CATALOG_FILE: Path = DATA_DIR / "products.json"

    # Carritos precargados al arrancar
    SEED_CARTS: bool = True
    SEED_CARTS_FILE: Path = DATA_DIR / "carts.json"

    # Reglas del carrito
    CART_LOCK_TIMEOUT_SECONDS: float = 5.0
    MAX_QUANTITY: int = 99
    DEFAULT_PAGE_LIMIT: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = False

# Instancia por defecto de la configuración; create_app() acepta otra para tests
settings = Settings()
