# ==============================================================================
# SERVICIO DE REPORTES DE VENTAS
# ==============================================================================
# Calcula el resumen de ventas de un rango de fechas. Solo lectura.
#
# RANGO: ambos extremos incluidos. Una fecha fin sin hora (YYYY-MM-DD)
# cubre el día completo (hasta 23:59:59.999999 UTC).
# ==============================================================================

from collections import defaultdict
from datetime import datetime, time, timezone
from typing import Any, Dict, Optional, Tuple

from shoe_pos.models import PaymentMethod
from shoe_pos.repositories import IProductRepository, ISalesRepository, parse_timestamp
from shoe_pos.services.errors import ValidationError

# Cantidad de productos en el ranking
TOP_PRODUCTS_LIMIT = 5

UNKNOWN_PRODUCT = 'Unknown Product'


class ReportService:
    """
    Servicio para reportes de ventas.

    Responsabilidades:
    - Validar el rango de fechas
    - Totales, ticket promedio y pares vendidos
    - Ranking de productos por ingresos
    - Ventas agrupadas por método de pago

    Depende solo de los protocolos de repositorio (no acoplado a JSON).
    """

    def __init__(self, sales_repo: ISalesRepository, product_repo: IProductRepository):
        self.sales_repo = sales_repo
        self.product_repo = product_repo

    def _parse_date(self, value: Any, end_of_day: bool = False) -> Optional[datetime]:
        """
        Parsea una fecha ISO. Retorna None si no puede parsear.

        Args:
            value: 'YYYY-MM-DD' o timestamp ISO completo
            end_of_day: Si es solo fecha, usar el final del día
        """
        if not isinstance(value, str) or not value.strip():
            return None
        value = value.strip()
        if len(value) == 10:
            try:
                day = datetime.strptime(value, '%Y-%m-%d').date()
            except ValueError:
                return None
            return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        return parse_timestamp(value)

    def _get_date_range(self, start_date: Any, end_date: Any) -> Tuple[datetime, datetime]:
        """
        Valida y convierte el rango solicitado.

        Raises:
            ValidationError: Fechas faltantes, inválidas o invertidas
        """
        if not start_date or not end_date:
            raise ValidationError('startDate and endDate are required')
        start = self._parse_date(start_date)
        end = self._parse_date(end_date, end_of_day=True)
        if start is None or end is None:
            raise ValidationError('Invalid date format')
        if start > end:
            raise ValidationError('startDate must be before endDate')
        return start, end

    def sales_report(self, start_date: Any, end_date: Any) -> Dict[str, Any]:
        """
        Genera el reporte de ventas del período.

        Args:
            start_date: Fecha inicio (incluida)
            end_date: Fecha fin (incluida)

        Returns:
            {
                'totalSales': int,
                'totalRevenue': float,
                'averageTransactionValue': float (sin redondear),
                'itemsSold': int,
                'topProducts': [{productId, name, quantitySold, revenue}],
                'salesByPaymentMethod': {'CASH': n, 'CARD': n, 'OTHER': n}
            }
        """
        start, end = self._get_date_range(start_date, end_date)
        sales = self.sales_repo.get_sales_by_date_range(start, end)

        total_revenue = 0.0
        items_sold = 0
        by_method = {m.value: 0 for m in PaymentMethod}
        product_stats = defaultdict(lambda: {'quantitySold': 0, 'revenue': 0.0})

        for sale in sales:
            total_revenue += float(sale.get('totalAmount', 0) or 0)
            method = sale.get('paymentMethod')
            if method in by_method:
                by_method[method] += 1
            for item in sale.get('items', []):
                qty = int(item.get('quantity', 0) or 0)
                items_sold += qty
                stats = product_stats[item.get('product')]
                stats['quantitySold'] += qty
                stats['revenue'] += float(item.get('subtotal', 0) or 0)

        ranked = sorted(product_stats.items(), key=lambda kv: kv[1]['revenue'], reverse=True)
        top_products = []
        for product_id, stats in ranked[:TOP_PRODUCTS_LIMIT]:
            product = self.product_repo.get_product(product_id) if product_id else None
            top_products.append({
                'productId': product_id,
                'name': product.get('name') if product else UNKNOWN_PRODUCT,
                'quantitySold': stats['quantitySold'],
                'revenue': round(stats['revenue'], 2),
            })

        total_sales = len(sales)
        return {
            'totalSales': total_sales,
            'totalRevenue': round(total_revenue, 2),
            'averageTransactionValue': total_revenue / total_sales if total_sales else 0,
            'itemsSold': items_sold,
            'topProducts': top_products,
            'salesByPaymentMethod': by_method,
        }
