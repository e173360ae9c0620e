# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con usuarios:
# registro, login, tokens de acceso, listado y eliminación.
#
# - Contraseñas: SIEMPRE hasheadas con werkzeug.security
# - Tokens: firmados con itsdangerous, con vencimiento (TOKEN_MAX_AGE)
#
# REGLA CRÍTICA - ROL SUPER_ADMIN:
# Es el SUPER USUARIO del sistema. NO puede ser eliminado ni aparece en
# el listado de usuarios. Esta validación se hace AQUÍ, no en las rutas.
# ==============================================================================

import logging
import re
from typing import Any, Dict, List, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from shoe_pos.models import User, UserRole
from shoe_pos.repositories import UnitOfWork, StorageError, UserRepository, new_id, is_valid_id
from shoe_pos.services.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ProtectedRoleError,
    ValidationError,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

MIN_PASSWORD_LENGTH = 6

TOKEN_SALT = 'shoe-pos-auth'


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Registro con validaciones (email, contraseña, rol, duplicados)
    - Autenticación y emisión de tokens
    - Verificación de tokens (usuario existente y activo)
    - Listado y eliminación (con protección de SUPER_ADMIN)
    """

    # Rol protegido: NO puede ser eliminado
    PROTECTED_ROLE = UserRole.SUPER_ADMIN.value

    VALID_ROLES = frozenset(r.value for r in UserRole)

    def __init__(self, user_repo: UserRepository, secret_key: str, token_max_age: int):
        """
        Inicializa el servicio de usuarios.

        Args:
            user_repo: Repositorio de usuarios
            secret_key: Clave para firmar tokens
            token_max_age: Vigencia del token en segundos
        """
        self.user_repo = user_repo
        self.token_max_age = token_max_age
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)

    # =========================================================================
    # TOKENS
    # =========================================================================

    def issue_token(self, user_id: str) -> str:
        """Genera un token firmado para el usuario."""
        return self._serializer.dumps({'userId': user_id})

    def authenticate_token(self, token: Optional[str]) -> User:
        """
        Verifica un token y retorna el usuario dueño.

        Args:
            token: Token Bearer recibido

        Returns:
            Usuario activo

        Raises:
            AuthenticationError: Token ausente, inválido, vencido o usuario inactivo
        """
        if not token:
            raise AuthenticationError('No token provided')
        try:
            payload = self._serializer.loads(token, max_age=self.token_max_age)
        except SignatureExpired:
            raise AuthenticationError('Token expired')
        except BadSignature:
            raise AuthenticationError('Invalid token')

        user_id = payload.get('userId') if isinstance(payload, dict) else None
        data = self.user_repo.get_user(user_id) if user_id else None
        if not data:
            raise AuthenticationError('Invalid or inactive user')
        user = User.from_dict(data)
        if not user.is_active:
            raise AuthenticationError('Invalid or inactive user')
        return user

    def _session_payload(self, user: User, message: str) -> Dict[str, Any]:
        return {
            'message': message,
            'token': self.issue_token(user.id),
            'user': {
                'userId': user.id,
                'firstName': user.first_name,
                'role': user.role,
            },
        }

    # =========================================================================
    # REGISTRO Y LOGIN
    # =========================================================================

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Registra un usuario nuevo y le entrega un token.

        Args:
            data: email, password, firstName, lastName, role

        Returns:
            {'message', 'token', 'user': {userId, firstName, role}}

        Raises:
            ValidationError: Campo faltante, email/contraseña/rol inválido
            ConflictError: Email ya registrado
        """
        if not isinstance(data, dict):
            raise ValidationError('All fields are required')

        email = data.get('email')
        password = data.get('password')
        first_name = data.get('firstName')
        last_name = data.get('lastName')
        role = data.get('role')

        fields = (email, password, first_name, last_name, role)
        if not all(isinstance(v, str) and v.strip() for v in fields):
            raise ValidationError('All fields are required')

        email = email.strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError('Invalid email format')
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')
        if role not in self.VALID_ROLES:
            raise ValidationError('Invalid role')

        with UnitOfWork(self.user_repo) as uow:
            users = uow.data(self.user_repo)
            if any((u.get('email') or '').lower() == email for u in users.values()):
                raise ConflictError('User already exists')

            user = User(
                id=new_id(),
                email=email,
                password_hash=generate_password_hash(password),
                first_name=first_name.strip(),
                last_name=last_name.strip(),
                role=role,
            )
            users[user.id] = user.to_dict()
            try:
                uow.commit()
            except StorageError as e:
                raise PersistenceError('Error registering user', error=str(e)) from e

        logger.info('Usuario %s registrado con rol %s', user.email, user.role)
        return self._session_payload(user, 'User registered successfully')

    def login(self, email: Any, password: Any) -> Dict[str, Any]:
        """
        Autentica un usuario por email y contraseña.

        Returns:
            {'message', 'token', 'user': {userId, firstName, role}}

        Raises:
            ValidationError: Faltan credenciales
            AuthenticationError: Credenciales inválidas o usuario inactivo
        """
        if not email or not password or not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError('Email and password are required')

        data = self.user_repo.get_user_by_email(email)
        if not data:
            logger.warning('Login fallido: %s no existe', email)
            raise AuthenticationError('Invalid credentials or inactive user')
        user = User.from_dict(data)
        if not user.is_active:
            logger.warning('Login fallido: %s inactivo', email)
            raise AuthenticationError('Invalid credentials or inactive user')

        if not check_password_hash(user.password_hash, password):
            logger.warning('Login fallido: contraseña incorrecta para %s', email)
            raise AuthenticationError('Invalid credentials')

        logger.info('Login exitoso: %s', user.email)
        return self._session_payload(user, 'Login successful')

    # =========================================================================
    # GESTIÓN DE USUARIOS
    # =========================================================================

    def list_users(self) -> List[Dict[str, Any]]:
        """Usuarios visibles (todos menos SUPER_ADMIN), sin contraseña."""
        return [
            User.from_dict(u).to_public_dict()
            for u in self.user_repo.get_users_excluding_role(self.PROTECTED_ROLE)
        ]

    def delete_user(self, user_id: str, actor: Optional[User] = None) -> None:
        """
        Elimina un usuario.

        Args:
            user_id: ID del usuario a eliminar
            actor: Usuario que realiza la acción (para el log)

        Raises:
            NotFoundError: Si no existe
            ProtectedRoleError: Si es SUPER_ADMIN
        """
        with UnitOfWork(self.user_repo) as uow:
            users = uow.data(self.user_repo)
            if not is_valid_id(user_id) or user_id not in users:
                raise NotFoundError('User not found')
            user = User.from_dict(users[user_id])
            if user.role == self.PROTECTED_ROLE:
                raise ProtectedRoleError('Cannot delete SUPER_ADMIN users')
            del users[user_id]
            try:
                uow.commit()
            except StorageError as e:
                raise PersistenceError('Error deleting user', error=str(e)) from e

        logger.info('Usuario %s eliminado por %s', user.email, actor.email if actor else 'sistema')
