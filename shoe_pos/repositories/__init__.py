# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (archivos JSON).
#
# ESTRUCTURA:
# ├── interfaces.py            → Protocolos (contratos de cada almacén)
# ├── base.py                  → Clases base JSON + UnitOfWork (transacciones)
# ├── product_repository.py    → products.json
# ├── customer_repository.py   → customers.json
# ├── sales_repository.py      → sales.json
# └── user_repository.py       → users.json
# ==============================================================================

from shoe_pos.repositories.interfaces import (
    IProductRepository,
    ICustomerRepository,
    ISalesRepository,
    IUserRepository,
)

from shoe_pos.repositories.base import (
    BaseRepository,
    DictRepository,
    ListRepository,
    UnitOfWork,
    StorageError,
    new_id,
    is_valid_id,
)
from shoe_pos.repositories.product_repository import ProductRepository
from shoe_pos.repositories.customer_repository import CustomerRepository
from shoe_pos.repositories.sales_repository import SalesRepository, parse_timestamp
from shoe_pos.repositories.user_repository import UserRepository

__all__ = [
    # Interfaces
    'IProductRepository',
    'ICustomerRepository',
    'ISalesRepository',
    'IUserRepository',

    # Clases base
    'BaseRepository',
    'DictRepository',
    'ListRepository',
    'UnitOfWork',
    'StorageError',
    'new_id',
    'is_valid_id',

    # Implementaciones JSON
    'ProductRepository',
    'CustomerRepository',
    'SalesRepository',
    'UserRepository',
    'parse_timestamp',
]
