# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Encapsula todo el acceso a sales.json
# Las ventas se almacenan como lista: [{venta1}, {venta2}, ...]
# Una venta se agrega una vez y nunca se modifica ni se elimina.
# ==============================================================================

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from shoe_pos.repositories.base import ListRepository


def parse_timestamp(ts_str: str) -> Optional[datetime]:
    """Parsea un timestamp ISO; sin zona horaria se asume UTC."""
    if not ts_str:
        return None
    try:
        dt = datetime.fromisoformat(ts_str.replace('Z', '+00:00'))
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class SalesRepository(ListRepository):
    """
    Repositorio para gestión de ventas.

    Formato de datos en sales.json:
    [
        {
            "id": "c3d4...",
            "customer": "a1b2...",
            "items": [{"product": "...", "size": "9", "quantity": 2,
                       "priceAtSale": 15.0, "subtotal": 30.0}],
            "totalAmount": 30.0,
            "paymentMethod": "CASH",
            "paymentStatus": "COMPLETED",
            "loyaltyPointsEarned": 3,
            "processedBy": "e5f6...",
            "createdAt": "2024-01-01T10:00:00+00:00"
        }
    ]
    """

    file_name = 'sales.json'

    def get_sale(self, sale_id: str) -> Optional[Dict[str, Any]]:
        """
        Busca una venta por su ID.

        Args:
            sale_id: ID de la venta

        Returns:
            Datos de la venta o None
        """
        return self.find_by('id', sale_id)

    def get_sales_by_date_range(
        self,
        start: datetime,
        end: datetime
    ) -> List[Dict[str, Any]]:
        """
        Obtiene ventas creadas dentro de un rango (ambos extremos incluidos).

        Args:
            start: Fecha/hora inicio (con zona horaria)
            end: Fecha/hora fin (con zona horaria)

        Returns:
            Lista de ventas en el rango
        """
        filtered = []
        for sale in self.get_all():
            dt = parse_timestamp(sale.get('createdAt', ''))
            if dt is None:
                continue
            if start <= dt <= end:
                filtered.append(sale)
        return filtered
