# ==============================================================================
# AUTENTICACIÓN Y PERMISOS DE RUTAS
# ==============================================================================
# Decoradores para las rutas de la API:
#   @token_required       → exige "Authorization: Bearer <token>" válido
#   @module_required(...) → además exige acceso a alguno de los módulos
#
# El usuario autenticado queda en g.current_user (entidad User).
# Los errores se lanzan como ServiceError y main.py los convierte a JSON.
# ==============================================================================

import logging
from functools import wraps

from flask import g, request

from shoe_pos.app_container import get_container
from shoe_pos.models import has_module_access
from shoe_pos.services.errors import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)


def _bearer_token():
    """Token del header Authorization ('Bearer <token>')."""
    header = request.headers.get('Authorization', '')
    parts = header.split(' ', 1)
    if len(parts) == 2 and parts[0].lower() == 'bearer':
        return parts[1].strip()
    return None


def token_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            g.current_user = get_container().user_service.authenticate_token(_bearer_token())
        except AuthenticationError as e:
            logger.info('Acceso rechazado a %s %s: %s', request.method, request.path, e.message)
            raise
        return f(*args, **kwargs)
    return wrapper


def module_required(*modules):
    """
    Exige token válido y acceso a alguno de los módulos indicados.

    Uso:
        @bp.route('/api/products', methods=['GET'])
        @module_required('inventory', 'products.view')
        def list_products(): ...
    """
    def deco(f):
        @wraps(f)
        def check(*args, **kwargs):
            user = g.current_user
            if not has_module_access(user.role, modules):
                logger.warning(
                    'Permiso denegado: %s (%s) → %s %s',
                    user.email, user.role, request.method, request.path
                )
                raise PermissionDeniedError(
                    f"Access denied: You don't have permission to access {' or '.join(modules)}"
                )
            return f(*args, **kwargs)
        return token_required(check)
    return deco
