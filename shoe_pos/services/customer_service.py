# ==============================================================================
# SERVICIO DE CLIENTES
# ==============================================================================
# Alta, edición, baja lógica y búsqueda de clientes, más el ajuste manual
# de puntos de fidelidad. Los puntos ganados por compras los acredita
# SalesService dentro de la transacción de la venta.
# ==============================================================================

import logging
from typing import Any, Dict, List

from shoe_pos.models import Customer, utc_now
from shoe_pos.repositories import CustomerRepository, UnitOfWork, StorageError, new_id, is_valid_id
from shoe_pos.services.errors import ConflictError, NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)

# Campo API → atributo de la entidad
EDITABLE_FIELDS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'email': 'email',
    'phone': 'phone',
}


class CustomerService:
    """
    Servicio para gestión de clientes.

    Responsabilidades:
    - CRUD de clientes (baja lógica con isActive)
    - Email único sin distinguir mayúsculas
    - Ajuste de puntos de fidelidad (nunca negativos)
    - Búsqueda por texto
    """

    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    def _clean_fields(self, data: Dict[str, Any], partial: bool) -> Dict[str, str]:
        """Valida los campos de texto y los devuelve ya recortados."""
        if not isinstance(data, dict):
            raise ValidationError('Invalid request body')
        cleaned = {}
        for api_name, attr in EDITABLE_FIELDS.items():
            if api_name not in data:
                if not partial:
                    raise ValidationError(f'{api_name} is required')
                continue
            value = data[api_name]
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f'{api_name} is required')
            cleaned[attr] = value.strip()
        if 'email' in cleaned and '@' not in cleaned['email']:
            raise ValidationError('Invalid email format')
        return cleaned

    def _load(self, customers: Dict[str, Any], customer_id: str) -> Customer:
        if not is_valid_id(customer_id) or customer_id not in customers:
            raise NotFoundError('Customer not found')
        return Customer.from_dict(customers[customer_id])

    def _commit(self, uow: UnitOfWork, action: str) -> None:
        try:
            uow.commit()
        except StorageError as e:
            raise PersistenceError(f'Error {action} customer', error=str(e)) from e

    def create_customer(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Registra un cliente nuevo con 0 puntos.

        Args:
            data: firstName, lastName, email, phone

        Returns:
            Cliente creado

        Raises:
            ValidationError: Falta algún campo
            ConflictError: Ya existe un cliente con ese email
        """
        fields = self._clean_fields(data, partial=False)

        with UnitOfWork(self.customer_repo) as uow:
            customers = uow.data(self.customer_repo)
            if CustomerRepository.find_by_email(fields['email'], customers):
                raise ConflictError('Customer with this email already exists')
            customer = Customer(id=new_id(), **fields)
            customers[customer.id] = customer.to_dict()
            self._commit(uow, 'creating')

        logger.info('Cliente %s registrado', customer.email)
        return customer.to_dict()

    def list_customers(self) -> List[Dict[str, Any]]:
        """Clientes activos."""
        return [Customer.from_dict(c).to_dict() for c in self.customer_repo.get_active_customers()]

    def get_customer(self, customer_id: str) -> Dict[str, Any]:
        data = self.customer_repo.get_customer(customer_id) if is_valid_id(customer_id) else None
        if not data:
            raise NotFoundError('Customer not found')
        return Customer.from_dict(data).to_dict()

    def update_customer(self, customer_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Actualiza los datos enviados. Si cambia el email, no puede
        coincidir con el de otro cliente.
        """
        fields = self._clean_fields(data, partial=True)

        with UnitOfWork(self.customer_repo) as uow:
            customers = uow.data(self.customer_repo)
            customer = self._load(customers, customer_id)
            if 'email' in fields and CustomerRepository.find_by_email(
                fields['email'], customers, exclude_id=customer.id
            ):
                raise ConflictError('Email already in use')
            for attr, value in fields.items():
                setattr(customer, attr, value.lower() if attr == 'email' else value)
            customer.updated_at = utc_now()
            customers[customer.id] = customer.to_dict()
            self._commit(uow, 'updating')

        return customer.to_dict()

    def delete_customer(self, customer_id: str) -> None:
        """Baja lógica del cliente."""
        with UnitOfWork(self.customer_repo) as uow:
            customers = uow.data(self.customer_repo)
            customer = self._load(customers, customer_id)
            customer.is_active = False
            customer.updated_at = utc_now()
            customers[customer.id] = customer.to_dict()
            self._commit(uow, 'deleting')
        logger.info('Cliente %s dado de baja', customer.email)

    def update_loyalty_points(self, customer_id: str, points: Any) -> Dict[str, Any]:
        """
        Suma (o resta, si es negativo) puntos al saldo del cliente.

        Raises:
            ValidationError: points no es entero
            ConflictError: El saldo quedaría negativo
        """
        if not isinstance(points, int) or isinstance(points, bool):
            raise ValidationError('Invalid points value')

        with UnitOfWork(self.customer_repo) as uow:
            customers = uow.data(self.customer_repo)
            customer = self._load(customers, customer_id)
            new_balance = customer.loyalty_points + points
            if new_balance < 0:
                raise ConflictError('Insufficient loyalty points')
            customer.loyalty_points = new_balance
            customer.updated_at = utc_now()
            customers[customer.id] = customer.to_dict()
            self._commit(uow, 'updating loyalty points of')

        logger.info('Puntos de %s: %+d → %d', customer.email, points, new_balance)
        return customer.to_dict()

    def search_customers(self, query: str) -> List[Dict[str, Any]]:
        """
        Busca clientes activos por nombre, apellido, email o teléfono.

        Raises:
            ValidationError: Si no se envió texto de búsqueda
        """
        if not query or not str(query).strip():
            raise ValidationError('Search query is required')
        needle = str(query).strip().lower()
        results = []
        for data in self.customer_repo.get_active_customers():
            customer = Customer.from_dict(data)
            haystack = (customer.first_name, customer.last_name, customer.email, customer.phone)
            if any(needle in (text or '').lower() for text in haystack):
                results.append(customer.to_dict())
        return results
