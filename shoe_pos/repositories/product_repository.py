# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a products.json
# Los productos se almacenan como diccionario: {id: {datos_producto}}
# ==============================================================================

import re
from typing import Any, Dict, List, Optional

from shoe_pos.repositories.base import DictRepository


class ProductRepository(DictRepository):
    """
    Repositorio para gestión del inventario de productos.

    Formato de datos en products.json:
    {
        "9f0c...": {
            "id": "9f0c...",
            "productCode": "CAS-0001",
            "name": "Runner",
            "sizes": [{"size": "9", "quantity": 4}, ...],
            ...
        }
    }
    """

    file_name = 'products.json'

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un producto por su ID.

        Args:
            product_id: ID del producto

        Returns:
            Datos del producto o None si no existe
        """
        return self.get_by_id(product_id)

    def get_active_products(self) -> List[Dict[str, Any]]:
        """Productos que no fueron dados de baja."""
        return [p for p in self.get_all().values() if p.get('isActive', True)]

    @staticmethod
    def next_product_code(category: str, products: Dict[str, Any]) -> str:
        """
        Genera el siguiente código de producto para una categoría.
        Formato: XXX-NNNN, con XXX = primeras tres letras de la categoría.

        Args:
            category: Categoría del producto
            products: Productos existentes {id: datos}

        Returns:
            Siguiente código disponible (ej: SAN-0003)
        """
        prefix = category[:3].upper()
        pattern = re.compile(rf'^{re.escape(prefix)}-(\d+)$')
        max_num = 0
        for product in products.values():
            match = pattern.match(product.get('productCode') or '')
            if match:
                max_num = max(max_num, int(match.group(1)))
        return f'{prefix}-{max_num + 1:04d}'
