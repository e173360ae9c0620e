# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la aplicación.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones
# 3. Las rutas solo llaman a servicios
# 4. Toda regla violada se reporta con una excepción de errors.py
#
# ESTRUCTURA:
# ├── errors.py            → Jerarquía ServiceError (código HTTP + detalle)
# ├── user_service.py      → Usuarios, login, tokens (¡protección SUPER_ADMIN!)
# ├── inventory_service.py → Productos, stock por talla, reporte de inventario
# ├── customer_service.py  → Clientes y puntos de fidelidad
# ├── sales_service.py     → Procesamiento atómico de ventas
# └── report_service.py    → Reporte de ventas por rango de fechas
# ==============================================================================

from shoe_pos.services.errors import (
    ServiceError,
    ValidationError,
    ConflictError,
    InsufficientStockError,
    AuthenticationError,
    PermissionDeniedError,
    ProtectedRoleError,
    NotFoundError,
    PersistenceError,
)
from shoe_pos.services.inventory_service import InventoryService
from shoe_pos.services.customer_service import CustomerService
from shoe_pos.services.sales_service import SalesService
from shoe_pos.services.report_service import ReportService
from shoe_pos.services.user_service import UserService

__all__ = [
    # Errores
    'ServiceError',
    'ValidationError',
    'ConflictError',
    'InsufficientStockError',
    'AuthenticationError',
    'PermissionDeniedError',
    'ProtectedRoleError',
    'NotFoundError',
    'PersistenceError',

    # Servicios
    'InventoryService',
    'CustomerService',
    'SalesService',
    'ReportService',
    'UserService',
]
