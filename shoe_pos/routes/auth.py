# ==============================================================================
# RUTAS DE AUTENTICACIÓN Y USUARIOS  (/api/auth)
# ==============================================================================

from flask import Blueprint, g, jsonify, request

from shoe_pos.app_container import get_container
from shoe_pos.routes.common import json_object
from shoe_pos.security import module_required

bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@bp.route('/register', methods=['POST'])
def register():
    result = get_container().user_service.register(request.get_json(silent=True))
    return jsonify(result), 201


@bp.route('/login', methods=['POST'])
def login():
    data = json_object()
    result = get_container().user_service.login(data.get('email'), data.get('password'))
    return jsonify(result)


@bp.route('/users', methods=['GET'])
@module_required('permissions')
def list_users():
    return jsonify(get_container().user_service.list_users())


@bp.route('/users/<user_id>', methods=['DELETE'])
@module_required('permissions')
def delete_user(user_id):
    get_container().user_service.delete_user(user_id, actor=g.current_user)
    return jsonify({'message': 'User deleted successfully'})
