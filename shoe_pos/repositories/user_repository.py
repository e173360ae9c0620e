# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Encapsula todo el acceso a users.json
# Los usuarios se almacenan como diccionario: {id: {email, password, role, ...}}
# ==============================================================================

from typing import Any, Dict, List, Optional

from shoe_pos.repositories.base import DictRepository


class UserRepository(DictRepository):
    """
    Repositorio para gestión de usuarios.

    Formato de datos en users.json:
    {
        "e5f6...": {"id": "e5f6...", "email": "admin@shop.com",
                    "password": "scrypt:...", "role": "ADMIN", ...}
    }
    """

    file_name = 'users.json'

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un usuario por su ID.

        Args:
            user_id: ID del usuario

        Returns:
            Datos del usuario o None
        """
        return self.get_by_id(user_id)

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un usuario por email (sin distinguir mayúsculas).

        Args:
            email: Email de login

        Returns:
            Datos del usuario o None
        """
        target = (email or '').strip().lower()
        for user in self.get_all().values():
            if (user.get('email') or '').lower() == target:
                return user
        return None

    def get_users_excluding_role(self, role: str) -> List[Dict[str, Any]]:
        """
        Obtiene usuarios que no tienen un rol dado, más recientes primero.

        Args:
            role: Rol a excluir

        Returns:
            Lista de usuarios
        """
        users = [u for u in self.get_all().values() if u.get('role') != role]
        users.sort(key=lambda u: u.get('createdAt', ''), reverse=True)
        return users

    # NOTA: La validación de credenciales se hace SOLO en UserService.
    # El repositorio solo maneja persistencia, no lógica de autenticación.
