# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
# Contratos que los servicios esperan de cada almacén. Otra persistencia
# solo necesita implementarlos y registrarse en app_container.py.
# ==============================================================================

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class IProductRepository(Protocol):
    """Almacén de productos con stock anidado por talla."""

    def get_all(self) -> Dict[str, Any]:
        ...

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        ...

    def get_active_products(self) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class ICustomerRepository(Protocol):
    """Almacén de clientes."""

    def get_all(self) -> Dict[str, Any]:
        ...

    def get_customer(self, customer_id: str) -> Optional[Dict[str, Any]]:
        ...

    def get_active_customers(self) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class ISalesRepository(Protocol):
    """Almacén de ventas (solo inserción)."""

    def get_all(self) -> List[Dict[str, Any]]:
        ...

    def get_sale(self, sale_id: str) -> Optional[Dict[str, Any]]:
        ...

    def get_sales_by_date_range(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Almacén de usuarios."""

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        ...

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        ...

    def get_users_excluding_role(self, role: str) -> List[Dict[str, Any]]:
        ...
