# ==============================================================================
# SERVICIO DE INVENTARIO
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con productos y stock
# por talla: alta, edición, baja lógica, ajustes de stock, búsqueda y
# reporte de inventario.
# ==============================================================================

import logging
import math
from numbers import Number
from typing import Any, Dict, List, Optional

from shoe_pos.models import (
    DEFAULT_MIN_STOCK_LEVEL,
    SIZES,
    FootwearCategory,
    Gender,
    Product,
    SizeStock,
    utc_now,
)
from shoe_pos.repositories import ProductRepository, UnitOfWork, StorageError, new_id, is_valid_id
from shoe_pos.services.errors import NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)

VALID_CATEGORIES = frozenset(c.value for c in FootwearCategory)
VALID_GENDERS = frozenset(g.value for g in Gender)

# Campos de texto obligatorios al crear
REQUIRED_TEXT_FIELDS = ('name', 'description', 'brand', 'color')


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool) and math.isfinite(value)


def _is_price(value: Any) -> bool:
    """Número finito, no negativo y con centavos como máximo."""
    return _is_number(value) and value >= 0 and round(value, 2) == value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class InventoryService:
    """
    Servicio para gestión de inventario.

    Responsabilidades:
    - CRUD de productos (baja lógica con isActive)
    - Stock por talla y total derivado
    - Productos con stock bajo
    - Búsqueda con filtros
    - Reporte de inventario
    """

    def __init__(self, product_repo: ProductRepository):
        """
        Inicializa el servicio de inventario.

        Args:
            product_repo: Repositorio de productos
        """
        self.product_repo = product_repo

    # =========================================================================
    # VALIDACIÓN
    # =========================================================================

    def _parse_sizes(self, raw_sizes: Any) -> List[SizeStock]:
        """Valida la lista de tallas [{size, quantity}] y la convierte."""
        if not isinstance(raw_sizes, list):
            raise ValidationError('sizes must be a list of {size, quantity}')
        sizes = []
        seen = set()
        for entry in raw_sizes:
            if not isinstance(entry, dict):
                raise ValidationError('sizes must be a list of {size, quantity}')
            size = str(entry.get('size', ''))
            quantity = entry.get('quantity')
            if size not in SIZES:
                raise ValidationError(f'Invalid size: {size}. Valid sizes: {", ".join(SIZES)}')
            if size in seen:
                raise ValidationError(f'Duplicate size: {size}')
            if not _is_int(quantity) or quantity < 0:
                raise ValidationError(f'Invalid quantity for size {size}')
            seen.add(size)
            sizes.append(SizeStock(size=size, quantity=quantity))
        return sizes

    def _apply_fields(self, product: Product, data: Dict[str, Any], partial: bool) -> None:
        """
        Valida y copia los campos editables sobre el producto.

        Args:
            product: Producto a modificar
            data: Datos recibidos (formato API)
            partial: True en actualizaciones (solo los campos presentes)
        """
        for field_name in REQUIRED_TEXT_FIELDS:
            if field_name not in data:
                if not partial:
                    raise ValidationError(f'{field_name} is required')
                continue
            value = data[field_name]
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f'{field_name} is required')
            setattr(product, field_name, value.strip())

        if 'price' in data or not partial:
            price = data.get('price')
            if not _is_price(price):
                raise ValidationError('price must be a non-negative amount with at most 2 decimals')
            product.price = float(price)

        if 'category' in data or not partial:
            category = data.get('category')
            if category not in VALID_CATEGORIES:
                raise ValidationError(f'Invalid category: {category}')
            product.category = category

        if 'gender' in data or not partial:
            gender = data.get('gender')
            if gender not in VALID_GENDERS:
                raise ValidationError(f'Invalid gender: {gender}')
            product.gender = gender

        if 'sizes' in data:
            product.sizes = self._parse_sizes(data['sizes'])

        if 'minStockLevel' in data:
            level = data['minStockLevel']
            if not _is_int(level) or level < 0:
                raise ValidationError('minStockLevel must be a non-negative integer')
            product.min_stock_level = level

        if partial and 'isActive' in data:
            if not isinstance(data['isActive'], bool):
                raise ValidationError('isActive must be a boolean')
            product.is_active = data['isActive']

    def _load(self, products: Dict[str, Any], product_id: str) -> Product:
        if not is_valid_id(product_id) or product_id not in products:
            raise NotFoundError('Product not found')
        return Product.from_dict(products[product_id])

    def _commit(self, uow: UnitOfWork, action: str) -> None:
        try:
            uow.commit()
        except StorageError as e:
            raise PersistenceError(f'Error {action} product', error=str(e)) from e

    # =========================================================================
    # OPERACIONES DE PRODUCTOS
    # =========================================================================

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea un nuevo producto y le asigna su código por categoría.

        Args:
            data: name, description, price, category, gender, brand, color,
                  sizes (opcional), minStockLevel (opcional)

        Returns:
            Producto creado
        """
        if not isinstance(data, dict):
            raise ValidationError('Invalid request body')

        product = Product(id=new_id(), name='', min_stock_level=DEFAULT_MIN_STOCK_LEVEL)
        self._apply_fields(product, data, partial=False)

        with UnitOfWork(self.product_repo) as uow:
            products = uow.data(self.product_repo)
            product.product_code = ProductRepository.next_product_code(product.category, products)
            products[product.id] = product.to_dict()
            self._commit(uow, 'creating')

        logger.info('Producto %s creado (%s)', product.product_code, product.name)
        return product.to_dict()

    def list_products(self) -> List[Dict[str, Any]]:
        """Productos activos."""
        return [Product.from_dict(p).to_dict() for p in self.product_repo.get_active_products()]

    def get_product(self, product_id: str) -> Dict[str, Any]:
        """
        Obtiene un producto por ID.

        Raises:
            NotFoundError: Si no existe
        """
        data = self.product_repo.get_product(product_id) if is_valid_id(product_id) else None
        if not data:
            raise NotFoundError('Product not found')
        return Product.from_dict(data).to_dict()

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Actualiza los campos enviados de un producto.
        El stock total se recalcula si cambian las tallas.

        Returns:
            Producto actualizado
        """
        if not isinstance(data, dict):
            raise ValidationError('Invalid request body')

        with UnitOfWork(self.product_repo) as uow:
            products = uow.data(self.product_repo)
            product = self._load(products, product_id)
            self._apply_fields(product, data, partial=True)
            product.updated_at = utc_now()
            products[product.id] = product.to_dict()
            self._commit(uow, 'updating')

        return product.to_dict()

    def delete_product(self, product_id: str) -> None:
        """Baja lógica: marca el producto como inactivo."""
        with UnitOfWork(self.product_repo) as uow:
            products = uow.data(self.product_repo)
            product = self._load(products, product_id)
            product.is_active = False
            product.updated_at = utc_now()
            products[product.id] = product.to_dict()
            self._commit(uow, 'deleting')
        logger.info('Producto %s dado de baja', product.product_code)

    def update_stock(self, product_id: str, size: Any, quantity: Any) -> Dict[str, Any]:
        """
        Ajusta el stock de una talla sumando `quantity` (puede ser negativo).

        Args:
            product_id: ID del producto
            size: Talla a ajustar
            quantity: Delta a aplicar

        Returns:
            Producto actualizado

        Raises:
            ValidationError: Talla/cantidad inválida, talla no configurada
                             o stock resultante negativo
        """
        if not size or not _is_int(quantity):
            raise ValidationError('Invalid size or quantity value')
        size = str(size)

        with UnitOfWork(self.product_repo) as uow:
            products = uow.data(self.product_repo)
            product = self._load(products, product_id)
            entry = product.get_size(size)
            if entry is None:
                raise ValidationError('Size not found for this product')
            new_quantity = entry.quantity + quantity
            if new_quantity < 0:
                raise ValidationError('Insufficient stock for this size')
            entry.quantity = new_quantity
            product.updated_at = utc_now()
            products[product.id] = product.to_dict()
            self._commit(uow, 'updating stock of')

        logger.info('Stock %s talla %s: %+d → %d', product.product_code, size, quantity, new_quantity)
        return product.to_dict()

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_low_stock_products(self) -> List[Dict[str, Any]]:
        """Productos activos con stock total en o bajo su mínimo."""
        products = [Product.from_dict(p) for p in self.product_repo.get_active_products()]
        return [p.to_dict() for p in products if p.is_low_stock]

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        gender: Optional[str] = None,
        brand: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None
    ) -> List[Dict[str, Any]]:
        """
        Búsqueda de productos activos.

        Args:
            query: Texto (sin distinguir mayúsculas) en nombre, marca o descripción
            category: Categoría exacta
            gender: Género exacto
            brand: Marca exacta
            min_price: Precio mínimo
            max_price: Precio máximo

        Returns:
            Lista de productos que coinciden
        """
        results = []
        query_lower = (query or '').lower()
        for data in self.product_repo.get_active_products():
            product = Product.from_dict(data)
            if query_lower and not any(
                query_lower in (text or '').lower()
                for text in (product.name, product.brand, product.description)
            ):
                continue
            if category and product.category != category:
                continue
            if gender and product.gender != gender:
                continue
            if brand and product.brand != brand:
                continue
            if min_price is not None and product.price < min_price:
                continue
            if max_price is not None and product.price > max_price:
                continue
            results.append(product.to_dict())
        return results

    def inventory_report(self) -> Dict[str, Any]:
        """
        Resumen del inventario activo.

        Returns:
            {
                'totalItems': int,       # pares en stock
                'totalValue': float,     # suma de precio * stock
                'lowStockItems': [...],  # productos en o bajo el mínimo
                'outOfStockItems': [...] # productos sin stock
            }
        """
        total_items = 0
        total_value = 0.0
        low_stock = []
        out_of_stock = []

        for data in self.product_repo.get_active_products():
            product = Product.from_dict(data)
            total_items += product.total_stock
            total_value += product.price * product.total_stock

            summary = {
                'productId': product.id,
                'productCode': product.product_code,
                'name': product.name,
                'brand': product.brand,
                'category': product.category,
            }
            if product.total_stock == 0:
                out_of_stock.append({
                    **summary,
                    'sizes': [s.to_dict() for s in product.sizes],
                })
            elif product.is_low_stock:
                low_stock.append({
                    **summary,
                    'sizes': [
                        {**s.to_dict(), 'isLowStock': s.quantity <= product.min_stock_level}
                        for s in product.sizes
                    ],
                    'minStockLevel': product.min_stock_level,
                })

        return {
            'totalItems': total_items,
            'totalValue': round(total_value, 2),
            'lowStockItems': low_stock,
            'outOfStockItems': out_of_stock,
        }
