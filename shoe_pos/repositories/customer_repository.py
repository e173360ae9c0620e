# ==============================================================================
# REPOSITORIO DE CLIENTES
# ==============================================================================
# Encapsula todo el acceso a customers.json
# Los clientes se almacenan como diccionario: {id: {datos_cliente}}
# ==============================================================================

from typing import Any, Dict, List, Optional

from shoe_pos.repositories.base import DictRepository


class CustomerRepository(DictRepository):
    """
    Repositorio para gestión de clientes.

    Formato de datos en customers.json:
    {
        "a1b2...": {
            "id": "a1b2...",
            "firstName": "Ana",
            "lastName": "Pérez",
            "email": "ana@example.com",
            "phone": "555-0101",
            "loyaltyPoints": 12,
            "isActive": true
        }
    }
    """

    file_name = 'customers.json'

    def get_customer(self, customer_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene un cliente por su ID."""
        return self.get_by_id(customer_id)

    def get_active_customers(self) -> List[Dict[str, Any]]:
        """Clientes que no fueron dados de baja."""
        return [c for c in self.get_all().values() if c.get('isActive', True)]

    @staticmethod
    def find_by_email(
        email: str,
        customers: Dict[str, Any],
        exclude_id: str = None
    ) -> Optional[Dict[str, Any]]:
        """
        Busca un cliente por email (sin distinguir mayúsculas).

        Args:
            email: Email a buscar
            customers: Clientes {id: datos}
            exclude_id: ID a ignorar (para validar al actualizar)

        Returns:
            Cliente con ese email o None
        """
        target = (email or '').strip().lower()
        for customer_id, customer in customers.items():
            if customer_id == exclude_id:
                continue
            if (customer.get('email') or '').lower() == target:
                return customer
        return None
