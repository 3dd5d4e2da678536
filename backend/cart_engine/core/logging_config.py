# backend/cart_engine/core/logging_config.py
"""
Configuración centralizada del logging de la aplicación.

Los módulos obtienen su logger con logging.getLogger(__name__); este módulo
sólo instala los handlers una vez, a partir de LOG_LEVEL, LOG_FORMAT y
LOG_FILE_PATH de Settings.
"""

import logging
import sys
from pathlib import Path

from cart_engine.core.config import Settings

# Loggers de terceros demasiado ruidosos a nivel INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: Settings) -> None:
    """Configura el logger raíz según la configuración recibida."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    # Solo configurar si no hay handlers (uvicorn o pytest pueden haberlos instalado)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        root.addHandler(handler)

    if settings.LOG_FILE_PATH:
        log_path = Path(settings.LOG_FILE_PATH)
        already_attached = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path.resolve()
            for h in root.handlers
        )
        if not already_attached:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
            root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
