# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Toda la configuración viene de variables de entorno, leídas una sola vez
# al crear la aplicación. Los tests pasan un dict a create_app() para
# sobrescribir valores (DATA_DIR temporal, SECRET_KEY fija, etc.).
#
# VARIABLES:
#   SHOE_POS_SECRET_KEY      → Firma de tokens (OBLIGATORIA en producción)
#   SHOE_POS_DATA_DIR        → Carpeta de los JSON (products, sales, ...)
#   SHOE_POS_TOKEN_MAX_AGE   → Vigencia del token en segundos (24h)
#   SHOE_POS_PRODUCTION      → "1" activa modo producción
#   SHOE_POS_LOG_DIR         → Carpeta de logs
#   SHOE_POS_LOG_LEVEL       → INFO, DEBUG, WARNING...
#   SHOE_POS_PROFILING       → "0" desactiva el profiling de rutas
#   SHOE_POS_CORS_ORIGINS    → Orígenes permitidos, separados por coma
# ==============================================================================

import os
from typing import Any, Dict

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

_DEFAULT_SECRET = 'shoe_pos_dev_secret_key_change_in_production'


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Valores de configuración de la aplicación."""

    def __init__(self, overrides: Dict[str, Any] = None):
        self.PRODUCTION_MODE = _env_flag('SHOE_POS_PRODUCTION', False)
        self.SECRET_KEY = os.environ.get('SHOE_POS_SECRET_KEY') or _DEFAULT_SECRET
        self.DATA_DIR = os.environ.get('SHOE_POS_DATA_DIR') or os.path.join(BASE_DIR, 'data')
        self.TOKEN_MAX_AGE = int(os.environ.get('SHOE_POS_TOKEN_MAX_AGE', 24 * 60 * 60))
        self.LOG_DIR = os.environ.get('SHOE_POS_LOG_DIR') or os.path.join(BASE_DIR, 'logs')
        self.LOG_LEVEL = os.environ.get('SHOE_POS_LOG_LEVEL', 'INFO').upper()
        self.ENABLE_PROFILING = _env_flag('SHOE_POS_PROFILING', True)
        origins = os.environ.get('SHOE_POS_CORS_ORIGINS', '*')
        self.CORS_ORIGINS = [o.strip() for o in origins.split(',') if o.strip()] or ['*']

        for key, value in (overrides or {}).items():
            setattr(self, key, value)

    @property
    def uses_default_secret(self) -> bool:
        return self.SECRET_KEY == _DEFAULT_SECRET

    def to_flask(self) -> Dict[str, Any]:
        """Claves que se copian a app.config."""
        return {
            'SECRET_KEY': self.SECRET_KEY,
            'DATA_DIR': self.DATA_DIR,
            'TOKEN_MAX_AGE': self.TOKEN_MAX_AGE,
            'PRODUCTION_MODE': self.PRODUCTION_MODE,
            'ENABLE_PROFILING': self.ENABLE_PROFILING,
            'MAX_CONTENT_LENGTH': 1 * 1024 * 1024,
        }
