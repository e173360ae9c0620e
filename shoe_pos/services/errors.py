# ==============================================================================
# ERRORES DE SERVICIO
# ==============================================================================
# Toda regla de negocio violada se reporta con una de estas excepciones.
# Cada una lleva su código HTTP y, si aplica, datos extra para el cliente.
# Las rutas NO las atrapan: main.py registra un errorhandler que las
# convierte a JSON {message, ...}.
# ==============================================================================

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Error base de la capa de servicios."""

    status_code = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_dict(self) -> Dict[str, Any]:
        """Cuerpo JSON de la respuesta de error."""
        body = {'message': self.message}
        body.update(self.extra)
        return body


class ValidationError(ServiceError):
    """Datos de entrada faltantes o mal formados."""
    status_code = 400


class ConflictError(ServiceError):
    """El dato choca con el estado actual (email duplicado, saldo negativo)."""
    status_code = 400


class InsufficientStockError(ConflictError):
    """No hay stock suficiente para una talla."""

    def __init__(self, product_name: str, size: str, available: int, requested: int):
        super().__init__(
            f'Insufficient stock for product: {product_name}, size: {size}',
            available=available,
            requested=requested,
        )
        self.available = available
        self.requested = requested


class AuthenticationError(ServiceError):
    """Token ausente, inválido o usuario inactivo."""
    status_code = 401


class PermissionDeniedError(ServiceError):
    """El rol no tiene acceso al módulo solicitado."""
    status_code = 403


class ProtectedRoleError(PermissionDeniedError):
    """Se intentó eliminar un usuario con el rol protegido SUPER_ADMIN."""
    pass


class NotFoundError(ServiceError):
    """Cliente, producto, talla, venta o usuario inexistente."""
    status_code = 404


class PersistenceError(ServiceError):
    """Falla al escribir en el almacenamiento."""
    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        if error:
            super().__init__(message, error=error)
        else:
            super().__init__(message)
