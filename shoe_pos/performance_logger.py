# ==============================================================================
# PROFILING DE LA API
# ==============================================================================
# Tiempos de cada petición a /api y de las funciones marcadas con
# @profile_function. Cada tipo de registro va a su propio archivo en LOG_DIR:
#   - performance.log     → una línea por petición
#   - slow_routes.log     → peticiones sobre THRESHOLD_WARNING / CRITICAL
#   - slow_functions.log  → funciones perfiladas sobre los mismos umbrales
#
# Se activa con ENABLE_PROFILING (variable SHOE_POS_PROFILING).
# ==============================================================================

import logging
import os
import threading
import time
from functools import wraps
from typing import Dict, Optional

from flask import g, request

# Milisegundos
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

LOG_FILES = {
    'shoe_pos.profiling.performance': 'performance.log',
    'shoe_pos.profiling.slow_routes': 'slow_routes.log',
    'shoe_pos.profiling.slow_functions': 'slow_functions.log',
}

performance_log = logging.getLogger('shoe_pos.profiling.performance')
slow_routes_log = logging.getLogger('shoe_pos.profiling.slow_routes')
slow_functions_log = logging.getLogger('shoe_pos.profiling.slow_functions')

_enabled = False

# Nombres legibles por regla de Flask
ROUTE_NAMES = {
    'POST /api/auth/register': 'Registrar usuario',
    'POST /api/auth/login': 'Iniciar sesión',
    'GET /api/auth/users': 'Listar usuarios',
    'DELETE /api/auth/users/<user_id>': 'Eliminar usuario',

    'GET /api/products': 'Listar productos',
    'POST /api/products': 'Crear producto',
    'GET /api/products/search': 'Buscar productos',
    'GET /api/products/low-stock': 'Productos con stock bajo',
    'GET /api/products/inventory-report': 'Reporte de inventario',
    'GET /api/products/<product_id>': 'Obtener producto',
    'PUT /api/products/<product_id>': 'Editar producto',
    'DELETE /api/products/<product_id>': 'Eliminar producto',
    'PATCH /api/products/<product_id>/stock': 'Ajustar stock',

    'GET /api/customers': 'Listar clientes',
    'POST /api/customers': 'Registrar cliente',
    'GET /api/customers/search': 'Buscar clientes',
    'GET /api/customers/<customer_id>': 'Obtener cliente',
    'PUT /api/customers/<customer_id>': 'Editar cliente',
    'DELETE /api/customers/<customer_id>': 'Eliminar cliente',
    'PATCH /api/customers/<customer_id>/loyalty-points': 'Ajustar puntos',

    'POST /api/sales': 'Procesar venta',
    'GET /api/sales': 'Listar ventas',
    'GET /api/sales/<sale_id>': 'Ver venta',
    'POST /api/sales/report': 'Reporte de ventas',
}


def _severity(time_ms: float) -> Optional[str]:
    """'CRITICAL', 'WARNING' o None según los umbrales."""
    if time_ms >= THRESHOLD_CRITICAL:
        return 'CRITICAL'
    if time_ms >= THRESHOLD_WARNING:
        return 'WARNING'
    return None


class _FunctionStats:
    """Acumulador de llamadas por nombre de función (thread-safe)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, float]] = {}

    def record(self, name: str, time_ms: float) -> None:
        with self._lock:
            entry = self._data.setdefault(name, {'calls': 0, 'total': 0.0, 'max': 0.0})
            entry['calls'] += 1
            entry['total'] += time_ms
            entry['max'] = max(entry['max'], time_ms)

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            return {
                name: {
                    'calls': int(entry['calls']),
                    'avg_time': round(entry['total'] / entry['calls'], 2),
                    'max_time': round(entry['max'], 2),
                }
                for name, entry in self._data.items()
            }

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


_stats = _FunctionStats()


# ==============================================================================
# RUTAS
# ==============================================================================

def _route_label(method: str, rule: str) -> str:
    key = f'{method} {rule}'
    return ROUTE_NAMES.get(key, key)


def _record_request(response):
    start = g.pop('profiling_start', None)
    if start is None or not request.path.startswith('/api'):
        return response

    elapsed = (time.perf_counter() - start) * 1000
    rule = request.url_rule.rule if request.url_rule else request.path
    label = _route_label(request.method, rule)
    current = g.get('current_user')
    user = current.email if current is not None else 'anónimo'

    performance_log.info(
        '%s | %s %s | %d | usuario=%s | %.0f ms',
        label, request.method, request.path, response.status_code, user, elapsed
    )

    level = _severity(elapsed)
    if level:
        threshold = THRESHOLD_CRITICAL if level == 'CRITICAL' else THRESHOLD_WARNING
        slow_routes_log.warning(
            '[%s] %s | %s %s | usuario=%s | %.0f ms (umbral %d ms)',
            level, label, request.method, request.path, user, elapsed, threshold
        )
    return response


def _open_log_files(log_dir: str) -> None:
    os.makedirs(log_dir, exist_ok=True)
    formatter = logging.Formatter('%(asctime)s %(message)s', '%Y-%m-%d %H:%M:%S')
    for logger_name, file_name in LOG_FILES.items():
        target = logging.getLogger(logger_name)
        path = os.path.abspath(os.path.join(log_dir, file_name))
        stale = [h for h in target.handlers if isinstance(h, logging.FileHandler) and h.baseFilename != path]
        for old in stale:
            target.removeHandler(old)
            old.close()
        if any(isinstance(h, logging.FileHandler) for h in target.handlers):
            continue
        handler = logging.FileHandler(path, encoding='utf-8')
        handler.setFormatter(formatter)
        target.addHandler(handler)
        target.setLevel(logging.INFO)
        target.propagate = False


def init_profiling(app, log_dir: str) -> None:
    """
    Engancha la medición de tiempos a la app Flask.

    No hace nada si app.config['ENABLE_PROFILING'] es falso; en ese caso
    @profile_function tampoco acumula estadísticas.
    """
    global _enabled

    _enabled = bool(app.config.get('ENABLE_PROFILING'))
    if not _enabled:
        return

    _open_log_files(log_dir)

    @app.before_request
    def _start_profiling():
        g.profiling_start = time.perf_counter()

    app.after_request(_record_request)


# ==============================================================================
# FUNCIONES
# ==============================================================================

def profile_function(func=None, name=None):
    """
    Mide cada llamada a la función decorada.

    Se puede usar como @profile_function o @profile_function(name='...');
    el nombre aparece en get_function_stats() y en slow_functions.log.
    """
    def decorator(fn):
        label = name or fn.__qualname__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not _enabled:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed = (time.perf_counter() - start) * 1000
                _stats.record(label, elapsed)
                level = _severity(elapsed)
                if level:
                    slow_functions_log.warning('[%s] %s | %.0f ms', level, label, elapsed)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def get_function_stats() -> Dict[str, Dict[str, float]]:
    """{nombre: {calls, avg_time, max_time}} de las funciones perfiladas."""
    return _stats.snapshot()


def reset_stats() -> None:
    _stats.clear()


__all__ = [
    'THRESHOLD_WARNING',
    'THRESHOLD_CRITICAL',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
