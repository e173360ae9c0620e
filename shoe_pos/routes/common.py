# ==============================================================================
# UTILIDADES COMPARTIDAS POR LAS RUTAS
# ==============================================================================

from typing import Any, Dict

from flask import request

from shoe_pos.services.errors import ValidationError


def json_object(message: str = 'Invalid request body') -> Dict[str, Any]:
    """
    Cuerpo JSON de la petición como diccionario.

    Un cuerpo vacío o ilegible cuenta como {} y deja que el servicio
    informe qué campo falta.

    Raises:
        ValidationError: Si el JSON no es un objeto (lista, número, texto)
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(message)
    return data
