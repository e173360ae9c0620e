# ==============================================================================
# LOGGING DE LA APLICACIÓN
# ==============================================================================
# Configura el logging estándar una sola vez: archivo diario en LOG_DIR y
# salida por consola. Cada módulo usa logging.getLogger(__name__).
# ==============================================================================

import logging
import os
import sys
from datetime import datetime

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_file_handler = None
_console_handler = None


def setup_logging(log_dir: str, level: str = 'INFO') -> str:
    """
    Configura el logger raíz del paquete.

    Args:
        log_dir: Carpeta donde se guarda el archivo de log
        level: Nivel mínimo (INFO, DEBUG, ...)

    Returns:
        Ruta del archivo de log del día
    """
    global _file_handler, _console_handler

    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f'shoe_pos_{datetime.now().strftime("%Y%m%d")}.log')

    pkg_logger = logging.getLogger('shoe_pos')
    pkg_logger.setLevel(getattr(logging, level, logging.INFO))

    if _file_handler is not None and _file_handler.baseFilename != os.path.abspath(log_path):
        # Otra carpeta de logs: se cierra el archivo anterior
        pkg_logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None

    if _file_handler is None:
        _file_handler = logging.FileHandler(log_path, encoding='utf-8')
        _file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        pkg_logger.addHandler(_file_handler)

    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stderr)
        _console_handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(message)s', '%H:%M:%S'))
        pkg_logger.addHandler(_console_handler)

    return log_path


def log_startup(config) -> None:
    """Registra información de inicio del sistema."""
    logger = logging.getLogger('shoe_pos')
    logger.info('=' * 60)
    logger.info('SHOE POS - SISTEMA INICIADO')
    logger.info('=' * 60)
    logger.info('Versión Python: %s', sys.version.split()[0])
    logger.info('Directorio de datos: %s', config.DATA_DIR)
    logger.info('Directorio de logs: %s', config.LOG_DIR)
    logger.info('Modo producción: %s', config.PRODUCTION_MODE)
    if config.uses_default_secret:
        logger.warning('SHOE_POS_SECRET_KEY no definida: usando clave de desarrollo')
