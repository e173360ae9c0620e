# ==============================================================================
# PERMISOS POR ROL
# ==============================================================================
# Tabla estática rol → módulos. Se carga al importar y no se modifica.
# Un permiso "modulo.accion" da acceso parcial: quien tiene "customer.create"
# pasa un chequeo que pida "customer" o "customer.create".
# ==============================================================================

from typing import FrozenSet, Iterable, Mapping, Union

from .entities import UserRole


ROLE_PERMISSIONS: Mapping[str, FrozenSet[str]] = {
    UserRole.SUPER_ADMIN.value: frozenset([
        'sales',
        'inventory',
        'customer',
        'analytics',
        'company',
        'permissions',
    ]),
    UserRole.ADMIN.value: frozenset([
        'sales',
        'inventory',
        'customer',
        'analytics',
    ]),
    UserRole.MANAGER.value: frozenset([
        'sales',
        'inventory',
        'customer',
    ]),
    UserRole.CASHIER.value: frozenset([
        'sales',
        'customer.create',
        'customer.search',
        'products.view',
        'products.search',
    ]),
}


def permissions_for(role: str) -> FrozenSet[str]:
    """Módulos asignados a un rol (vacío si el rol no existe)."""
    if isinstance(role, UserRole):
        role = role.value
    return ROLE_PERMISSIONS.get(role, frozenset())


def has_module_access(role: str, required: Union[str, Iterable[str]]) -> bool:
    """
    Verifica si un rol puede acceder a alguno de los módulos pedidos.

    Args:
        role: Rol del usuario
        required: Módulo o lista de módulos (basta con uno)

    Returns:
        True si el rol tiene el módulo exacto o un sub-permiso "modulo.*"
    """
    allowed = permissions_for(role)
    modules = [required] if isinstance(required, str) else list(required)
    for module in modules:
        if module in allowed:
            return True
        prefix = module + '.'
        if any(p.startswith(prefix) for p in allowed):
            return True
    return False
