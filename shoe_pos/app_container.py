# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS
# ==============================================================================
# Un solo lugar donde se construyen repositorios y servicios. create_app()
# instala el contenedor activo; las rutas lo piden con get_container().
#
# Cada dependencia se crea la primera vez que se pide y se reutiliza
# después. Otra persistencia solo necesita repositorios que cumplan los
# protocolos de repositories/interfaces.py, construidos aquí.
# ==============================================================================

from typing import Any, Callable, Dict, Optional

from shoe_pos.repositories import (
    CustomerRepository,
    ProductRepository,
    SalesRepository,
    UserRepository,
)
from shoe_pos.services import (
    CustomerService,
    InventoryService,
    ReportService,
    SalesService,
    UserService,
)


class AppContainer:
    """
    Dependencias de una instancia de la aplicación.

    Uso:
        AppContainer.install(data_dir, secret_key, token_max_age)
        get_container().sales_service.create_sale(...)
    """

    _instance: Optional['AppContainer'] = None

    def __init__(self, data_dir: str, secret_key: str, token_max_age: int = 24 * 60 * 60):
        self.data_dir = data_dir
        self.secret_key = secret_key
        self.token_max_age = token_max_age
        self._built: Dict[str, Any] = {}

    def _lazy(self, key: str, factory: Callable[[], Any]) -> Any:
        if key not in self._built:
            self._built[key] = factory()
        return self._built[key]

    # Almacenes

    @property
    def product_repo(self) -> ProductRepository:
        return self._lazy('product_repo', lambda: ProductRepository(self.data_dir))

    @property
    def customer_repo(self) -> CustomerRepository:
        return self._lazy('customer_repo', lambda: CustomerRepository(self.data_dir))

    @property
    def sales_repo(self) -> SalesRepository:
        return self._lazy('sales_repo', lambda: SalesRepository(self.data_dir))

    @property
    def user_repo(self) -> UserRepository:
        return self._lazy('user_repo', lambda: UserRepository(self.data_dir))

    # Servicios

    @property
    def inventory_service(self) -> InventoryService:
        return self._lazy('inventory_service', lambda: InventoryService(self.product_repo))

    @property
    def customer_service(self) -> CustomerService:
        return self._lazy('customer_service', lambda: CustomerService(self.customer_repo))

    @property
    def sales_service(self) -> SalesService:
        return self._lazy('sales_service', lambda: SalesService(
            self.sales_repo, self.product_repo, self.customer_repo, self.user_repo
        ))

    @property
    def report_service(self) -> ReportService:
        return self._lazy('report_service', lambda: ReportService(self.sales_repo, self.product_repo))

    @property
    def user_service(self) -> UserService:
        return self._lazy('user_service', lambda: UserService(
            self.user_repo, self.secret_key, self.token_max_age
        ))

    def reset(self) -> None:
        """Descarta las instancias creadas; se vuelven a construir al pedirlas."""
        self._built.clear()

    @classmethod
    def install(cls, *args, **kwargs) -> 'AppContainer':
        """Crea el contenedor y lo deja como activo."""
        container = cls(*args, **kwargs)
        # Los archivos se crean al arrancar, no dentro de una transacción
        for repo_name in ('product_repo', 'customer_repo', 'sales_repo', 'user_repo'):
            getattr(container, repo_name)
        cls._instance = container
        return container

    @classmethod
    def reset_instance(cls) -> None:
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container() -> AppContainer:
    """
    Contenedor activo.

    Raises:
        RuntimeError: Si todavía no se llamó a create_app()
    """
    if AppContainer._instance is None:
        raise RuntimeError('AppContainer no inicializado: usar create_app()')
    return AppContainer._instance
