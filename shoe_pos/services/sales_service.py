# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con ventas.
#
# create_sale() es la ÚNICA función que crea ventas. Dentro de una sola
# transacción (UnitOfWork sobre productos, clientes y ventas):
#   1. descuenta el stock de cada talla vendida
#   2. registra la venta con el precio vigente de cada producto
#   3. acredita los puntos de fidelidad al cliente
# Si cualquier paso falla, ninguno de los tres archivos cambia.
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional, Tuple

from shoe_pos.models import (
    Customer,
    PaymentMethod,
    PaymentStatus,
    Product,
    Sale,
    SaleItem,
    utc_now,
)
from shoe_pos.performance_logger import profile_function
from shoe_pos.repositories import (
    CustomerRepository,
    ProductRepository,
    SalesRepository,
    StorageError,
    UnitOfWork,
    UserRepository,
    is_valid_id,
    new_id,
)
from shoe_pos.services.errors import (
    AuthenticationError,
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

VALID_PAYMENT_METHODS = frozenset(m.value for m in PaymentMethod)

INVALID_BODY_MESSAGE = 'Invalid request body. Required: customerId, items array with at least one item'


class SalesService:
    """
    Servicio para gestión de ventas.

    Responsabilidades:
    - Procesar ventas de forma atómica (stock + venta + puntos)
    - Consultar ventas con sus referencias resueltas
    """

    def __init__(
        self,
        sales_repo: SalesRepository,
        product_repo: ProductRepository,
        customer_repo: CustomerRepository,
        user_repo: UserRepository
    ):
        """
        Inicializa el servicio de ventas.

        Args:
            sales_repo: Repositorio de ventas
            product_repo: Repositorio de productos
            customer_repo: Repositorio de clientes
            user_repo: Repositorio de usuarios (para resolver processedBy)
        """
        self.sales_repo = sales_repo
        self.product_repo = product_repo
        self.customer_repo = customer_repo
        self.user_repo = user_repo

    # =========================================================================
    # CREACIÓN DE VENTAS
    # =========================================================================

    @profile_function(name='Procesar venta')
    def create_sale(
        self,
        customer_id: Any,
        items: Any,
        payment_method: Any,
        actor_id: Optional[str]
    ) -> Dict[str, Any]:
        """
        Procesa una venta completa.

        Las validaciones se hacen en orden y la primera que falla corta todo:
        cuerpo → usuario → cliente → cada ítem (formato de ID, cantidad,
        producto, talla, stock).

        Args:
            customer_id: ID del cliente que compra
            items: Lista de {productId, size, quantity}
            payment_method: CASH, CARD u OTHER
            actor_id: ID del usuario que registra la venta (del token)

        Returns:
            {'sale': venta creada, 'loyaltyPointsEarned': puntos acreditados}

        Raises:
            ValidationError: Cuerpo inválido, ID mal formado o cantidad inválida
            AuthenticationError: No hay usuario en el token
            NotFoundError: Cliente, producto o talla inexistente
            InsufficientStockError: No alcanza el stock de una talla
            PersistenceError: Falló la escritura (no se guardó nada)
        """
        if (
            not customer_id
            or not isinstance(items, list)
            or not items
            or not isinstance(payment_method, str)
            or payment_method not in VALID_PAYMENT_METHODS
        ):
            raise ValidationError(INVALID_BODY_MESSAGE)

        if not actor_id:
            raise AuthenticationError('User ID not found in token')

        try:
            sale, customer = self._record_sale(customer_id, items, payment_method, actor_id)
        except StorageError as e:
            logger.error('Venta no registrada (cliente %s): %s', customer_id, e)
            raise PersistenceError('Error processing sale', error=str(e)) from e

        logger.info(
            'Venta %s: %d pares, total %.2f, %s, +%d puntos a %s',
            sale.id, sale.item_count, sale.total_amount, sale.payment_method,
            sale.loyalty_points_earned, customer.email
        )
        return {'sale': sale.to_dict(), 'loyaltyPointsEarned': sale.loyalty_points_earned}

    def _record_sale(
        self,
        customer_id: Any,
        items: List[Any],
        payment_method: str,
        actor_id: str
    ) -> Tuple[Sale, Customer]:
        """Descuenta stock, registra la venta y acredita puntos en una sola transacción."""
        with UnitOfWork(self.product_repo, self.customer_repo, self.sales_repo) as uow:
            products = uow.data(self.product_repo)
            customers = uow.data(self.customer_repo)
            sales = uow.data(self.sales_repo)

            customer_data = customers.get(customer_id) if isinstance(customer_id, str) else None
            if not customer_data:
                raise NotFoundError('Customer not found')
            customer = Customer.from_dict(customer_data)

            sale_items = self._reserve_items(items, products)

            now = utc_now()
            sale = Sale(
                id=new_id(),
                customer_id=customer.id,
                processed_by=actor_id,
                payment_method=payment_method,
                payment_status=PaymentStatus.COMPLETED.value,
                items=sale_items,
                created_at=now,
            )
            sale.calculate_totals()
            sales.append(sale.to_dict())

            customer.loyalty_points += sale.loyalty_points_earned
            customer.updated_at = now
            customers[customer.id] = customer.to_dict()

            uow.commit()
        return sale, customer

    def _reserve_items(
        self,
        items: List[Any],
        products: Dict[str, Any]
    ) -> List[SaleItem]:
        """
        Valida cada ítem y descuenta su stock sobre la copia de trabajo.

        Un mismo producto/talla puede repetirse en la lista: cada línea ve el
        stock que dejaron las anteriores.

        Returns:
            Ítems de la venta con el precio vigente del producto
        """
        sale_items = []
        for item in items:
            if not isinstance(item, dict):
                raise ValidationError(INVALID_BODY_MESSAGE)

            product_id = item.get('productId')
            size = item.get('size')
            quantity = item.get('quantity')

            if not is_valid_id(product_id):
                raise ValidationError(f'Invalid product ID format: {product_id}')

            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
                raise ValidationError(f'Invalid quantity for product: {product_id}')

            product_data = products.get(product_id)
            if not product_data:
                raise NotFoundError(f'Product not found: {product_id}')
            product = Product.from_dict(product_data)

            size = str(size) if size is not None else ''
            entry = product.get_size(size)
            if entry is None:
                raise NotFoundError(f'Size {size} not found for product: {product.name}')

            if entry.quantity < quantity:
                raise InsufficientStockError(product.name, size, entry.quantity, quantity)

            entry.quantity -= quantity
            product.updated_at = utc_now()
            products[product.id] = product.to_dict()

            sale_items.append(SaleItem(
                product_id=product.id,
                size=size,
                quantity=quantity,
                price_at_sale=product.price,
            ))
        return sale_items

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_sale(self, sale_id: str) -> Dict[str, Any]:
        """
        Obtiene una venta con cliente, productos y usuario resueltos.

        Raises:
            NotFoundError: Si la venta no existe
        """
        data = self.sales_repo.get_sale(sale_id) if is_valid_id(sale_id) else None
        if not data:
            raise NotFoundError('Sale not found')
        return self._populate(
            [data],
            self.customer_repo.get_all(),
            self.product_repo.get_all(),
        )[0]

    def list_sales(self) -> List[Dict[str, Any]]:
        """Todas las ventas, más recientes primero, con referencias resueltas."""
        sales = sorted(self.sales_repo.get_all(), key=lambda s: s.get('createdAt', ''), reverse=True)
        return self._populate(sales, self.customer_repo.get_all(), self.product_repo.get_all())

    def _populate(
        self,
        sales: List[Dict[str, Any]],
        customers: Dict[str, Any],
        products: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Reemplaza los IDs de cliente, producto y usuario por sus datos básicos."""
        users_cache: Dict[str, Optional[Dict[str, Any]]] = {}
        populated = []

        for data in sales:
            sale = Sale.from_dict(data).to_dict()

            customer = customers.get(sale['customer'])
            sale['customer'] = {
                'id': customer.get('id'),
                'firstName': customer.get('firstName', ''),
                'lastName': customer.get('lastName', ''),
                'email': customer.get('email', ''),
            } if customer else None

            for item in sale['items']:
                product = products.get(item['product'])
                item['product'] = {
                    'id': product.get('id'),
                    'name': product.get('name', ''),
                    'price': product.get('price', 0.0),
                } if product else None

            user_id = sale['processedBy']
            if user_id not in users_cache:
                users_cache[user_id] = self.user_repo.get_user(user_id)
            user = users_cache[user_id]
            sale['processedBy'] = {
                'id': user.get('id'),
                'firstName': user.get('firstName', ''),
                'lastName': user.get('lastName', ''),
            } if user else None

            populated.append(sale)
        return populated
