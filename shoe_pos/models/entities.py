# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia.
# to_dict() produce el formato JSON (claves camelCase, igual que la API);
# from_dict() lo lee de vuelta.
# ==============================================================================

import math
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum
from datetime import datetime, timezone


def utc_now() -> str:
    """Timestamp ISO en UTC."""
    return datetime.now(timezone.utc).isoformat()


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class FootwearCategory(str, Enum):
    """Categorías de calzado."""
    CASUAL_SHOES = 'CASUAL_SHOES'
    SANDALS = 'SANDALS'
    SLIPPERS = 'SLIPPERS'
    SPORTS_SHOES = 'SPORTS_SHOES'
    FORMAL_SHOES = 'FORMAL_SHOES'
    CLOGS = 'CLOGS'
    BEACHWEAR = 'BEACHWEAR'


class Gender(str, Enum):
    """Público objetivo del producto."""
    MENS = 'MENS'
    WOMENS = 'WOMENS'
    UNISEX = 'UNISEX'
    KIDS = 'KIDS'


class PaymentMethod(str, Enum):
    """Métodos de pago aceptados."""
    CASH = 'CASH'
    CARD = 'CARD'
    OTHER = 'OTHER'


class PaymentStatus(str, Enum):
    """Estado del pago de una venta (se fija al crearla)."""
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'
    FAILED = 'FAILED'


class UserRole(str, Enum):
    """Roles de usuario, de mayor a menor privilegio."""
    SUPER_ADMIN = 'SUPER_ADMIN'
    ADMIN = 'ADMIN'
    MANAGER = 'MANAGER'
    CASHIER = 'CASHIER'


# Tallas válidas (en orden)
SIZES = ('6', '7', '8', '9', '10', '11', '12')

DEFAULT_MIN_STOCK_LEVEL = 5

# 1 punto por cada 10 de compra
LOYALTY_POINT_VALUE = 10


def loyalty_points_for(total_amount: float) -> int:
    """Puntos de fidelidad ganados por una compra: floor(total / 10)."""
    if total_amount <= 0:
        return 0
    return int(math.floor(total_amount / LOYALTY_POINT_VALUE))


# ==============================================================================
# ENTIDADES DE INVENTARIO
# ==============================================================================

@dataclass
class SizeStock:
    """Cantidad disponible de una talla."""
    size: str
    quantity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'size': self.size, 'quantity': self.quantity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SizeStock':
        return cls(size=str(data.get('size', '')), quantity=int(data.get('quantity', 0) or 0))


@dataclass
class Product:
    """
    Producto del inventario.

    El stock real vive en `sizes`; total_stock siempre se calcula desde ahí
    y nunca se lee del almacenamiento.

    Attributes:
        id: Identificador interno (hex de 32 caracteres)
        product_code: Código legible por categoría (ej: CAS-0001)
        name: Nombre del producto
        description: Descripción
        brand: Marca
        category: Categoría de calzado
        gender: Público objetivo
        color: Color
        price: Precio de venta actual
        sizes: Stock por talla
        min_stock_level: Stock mínimo antes de alerta
        is_active: False si fue dado de baja (soft delete)
    """
    id: str
    name: str
    description: str = ''
    brand: str = ''
    category: str = FootwearCategory.CASUAL_SHOES.value
    gender: str = Gender.UNISEX.value
    color: str = ''
    price: float = 0.0
    sizes: List[SizeStock] = field(default_factory=list)
    product_code: str = ''
    min_stock_level: int = DEFAULT_MIN_STOCK_LEVEL
    is_active: bool = True
    created_at: str = ''
    updated_at: str = ''

    def __post_init__(self):
        if not self.created_at:
            self.created_at = utc_now()
        if not self.updated_at:
            self.updated_at = self.created_at

    @property
    def total_stock(self) -> int:
        """Stock total de todas las tallas."""
        return sum(s.quantity for s in self.sizes)

    @property
    def is_low_stock(self) -> bool:
        """Verifica si el stock está en o por debajo del mínimo."""
        return self.total_stock <= self.min_stock_level

    def get_size(self, size: str) -> Optional[SizeStock]:
        """Busca el stock de una talla."""
        for entry in self.sizes:
            if entry.size == size:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia JSON."""
        return {
            'id': self.id,
            'productCode': self.product_code,
            'name': self.name,
            'description': self.description,
            'brand': self.brand,
            'category': self.category,
            'gender': self.gender,
            'color': self.color,
            'price': self.price,
            'sizes': [s.to_dict() for s in self.sizes],
            'totalStock': self.total_stock,
            'minStockLevel': self.min_stock_level,
            'isActive': self.is_active,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario. Ignora totalStock (es derivado)."""
        return cls(
            id=data.get('id', ''),
            product_code=data.get('productCode', ''),
            name=data.get('name', ''),
            description=data.get('description', ''),
            brand=data.get('brand', ''),
            category=data.get('category', FootwearCategory.CASUAL_SHOES.value),
            gender=data.get('gender', Gender.UNISEX.value),
            color=data.get('color', ''),
            price=float(data.get('price', 0.0) or 0.0),
            sizes=[SizeStock.from_dict(s) for s in data.get('sizes', [])],
            min_stock_level=int(data.get('minStockLevel', DEFAULT_MIN_STOCK_LEVEL)),
            is_active=bool(data.get('isActive', True)),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )


# ==============================================================================
# ENTIDADES DE CLIENTE
# ==============================================================================

@dataclass
class Customer:
    """
    Cliente de la tienda.

    Attributes:
        email: Único, siempre en minúsculas
        loyalty_points: Saldo de puntos (nunca negativo)
        is_active: False si fue dado de baja (soft delete)
    """
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str = ''
    loyalty_points: int = 0
    is_active: bool = True
    created_at: str = ''
    updated_at: str = ''

    def __post_init__(self):
        self.email = (self.email or '').strip().lower()
        if not self.created_at:
            self.created_at = utc_now()
        if not self.updated_at:
            self.updated_at = self.created_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'loyaltyPoints': self.loyalty_points,
            'isActive': self.is_active,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(
            id=data.get('id', ''),
            first_name=data.get('firstName', ''),
            last_name=data.get('lastName', ''),
            email=data.get('email', ''),
            phone=data.get('phone', ''),
            loyalty_points=int(data.get('loyaltyPoints', 0) or 0),
            is_active=bool(data.get('isActive', True)),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )


# ==============================================================================
# ENTIDADES DE VENTA
# ==============================================================================

@dataclass
class SaleItem:
    """
    Ítem individual dentro de una venta.

    Attributes:
        product_id: ID del producto
        size: Talla vendida
        quantity: Cantidad vendida (>= 1)
        price_at_sale: Precio unitario copiado del producto al vender
        subtotal: price_at_sale * quantity
    """
    product_id: str
    size: str
    quantity: int
    price_at_sale: float
    subtotal: float = 0.0

    def __post_init__(self):
        """Calcula el subtotal si no fue proporcionado."""
        if not self.subtotal:
            self.subtotal = round(self.price_at_sale * self.quantity, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product': self.product_id,
            'size': self.size,
            'quantity': self.quantity,
            'priceAtSale': self.price_at_sale,
            'subtotal': self.subtotal,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SaleItem':
        return cls(
            product_id=data.get('product', ''),
            size=str(data.get('size', '')),
            quantity=int(data.get('quantity', 0) or 0),
            price_at_sale=float(data.get('priceAtSale', 0.0) or 0.0),
            subtotal=float(data.get('subtotal', 0.0) or 0.0),
        )


@dataclass
class Sale:
    """
    Representa una venta completa. Se escribe una sola vez y no se modifica.

    Attributes:
        id: Identificador de la venta
        customer_id: Cliente que compró
        items: Ítems vendidos
        total_amount: Suma de subtotales
        payment_method: CASH, CARD u OTHER
        payment_status: Estado del pago (COMPLETED al crearse por transacción)
        loyalty_points_earned: floor(total_amount / 10)
        processed_by: Usuario que registró la venta
    """
    id: str
    customer_id: str
    processed_by: str
    payment_method: str = PaymentMethod.CASH.value
    payment_status: str = PaymentStatus.PENDING.value
    items: List[SaleItem] = field(default_factory=list)
    total_amount: float = 0.0
    loyalty_points_earned: int = 0
    created_at: str = ''
    updated_at: str = ''

    def __post_init__(self):
        if not self.created_at:
            self.created_at = utc_now()
        if not self.updated_at:
            self.updated_at = self.created_at

    @property
    def item_count(self) -> int:
        """Cantidad total de pares vendidos."""
        return sum(item.quantity for item in self.items)

    def calculate_totals(self) -> None:
        """Recalcula total y puntos a partir de los ítems."""
        self.total_amount = round(sum(item.subtotal for item in self.items), 2)
        self.loyalty_points_earned = loyalty_points_for(self.total_amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'customer': self.customer_id,
            'items': [item.to_dict() for item in self.items],
            'totalAmount': self.total_amount,
            'paymentMethod': self.payment_method,
            'paymentStatus': self.payment_status,
            'loyaltyPointsEarned': self.loyalty_points_earned,
            'processedBy': self.processed_by,
            'itemCount': self.item_count,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        return cls(
            id=data.get('id', ''),
            customer_id=data.get('customer', ''),
            processed_by=data.get('processedBy', ''),
            payment_method=data.get('paymentMethod', PaymentMethod.CASH.value),
            payment_status=data.get('paymentStatus', PaymentStatus.PENDING.value),
            items=[SaleItem.from_dict(i) for i in data.get('items', [])],
            total_amount=float(data.get('totalAmount', 0.0) or 0.0),
            loyalty_points_earned=int(data.get('loyaltyPointsEarned', 0) or 0),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )


# ==============================================================================
# ENTIDADES DE USUARIO
# ==============================================================================

@dataclass
class User:
    """
    Usuario del sistema.

    Attributes:
        email: Identificador de login (único)
        password_hash: Hash de la contraseña (nunca almacenar en texto plano)
        role: Rol que define los módulos accesibles
    """
    id: str
    email: str
    password_hash: str
    first_name: str = ''
    last_name: str = ''
    role: str = UserRole.CASHIER.value
    is_active: bool = True
    created_at: str = ''
    updated_at: str = ''

    def __post_init__(self):
        self.email = (self.email or '').strip().lower()
        if not self.created_at:
            self.created_at = utc_now()
        if not self.updated_at:
            self.updated_at = self.created_at

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia (incluye el hash)."""
        d = self.to_public_dict()
        d['password'] = self.password_hash
        return d

    def to_public_dict(self) -> Dict[str, Any]:
        """Datos del usuario sin el hash de contraseña."""
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'role': self.role.value if isinstance(self.role, Enum) else self.role,
            'isActive': self.is_active,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        role_str = data.get('role', UserRole.CASHIER.value)
        try:
            role = UserRole(role_str).value
        except ValueError:
            role = UserRole.CASHIER.value
        return cls(
            id=data.get('id', ''),
            email=data.get('email', ''),
            password_hash=data.get('password', ''),
            first_name=data.get('firstName', ''),
            last_name=data.get('lastName', ''),
            role=role,
            is_active=bool(data.get('isActive', True)),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )
