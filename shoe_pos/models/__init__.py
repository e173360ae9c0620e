# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio (dataclasses) y la tabla de permisos por rol.
# ==============================================================================

from .entities import (
    # Enumeraciones y constantes
    FootwearCategory,
    Gender,
    PaymentMethod,
    PaymentStatus,
    UserRole,
    SIZES,
    DEFAULT_MIN_STOCK_LEVEL,
    loyalty_points_for,
    utc_now,

    # Inventario
    Product,
    SizeStock,

    # Clientes
    Customer,

    # Ventas
    Sale,
    SaleItem,

    # Usuarios
    User,
)
from .permissions import ROLE_PERMISSIONS, has_module_access, permissions_for

__all__ = [
    'FootwearCategory',
    'Gender',
    'PaymentMethod',
    'PaymentStatus',
    'UserRole',
    'SIZES',
    'DEFAULT_MIN_STOCK_LEVEL',
    'loyalty_points_for',
    'utc_now',

    'Product',
    'SizeStock',

    'Customer',

    'Sale',
    'SaleItem',

    'User',

    'ROLE_PERMISSIONS',
    'has_module_access',
    'permissions_for',
]
