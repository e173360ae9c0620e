# ==============================================================================
# RUTAS DE CLIENTES  (/api/customers)
# ==============================================================================

from flask import Blueprint, jsonify, request

from shoe_pos.app_container import get_container
from shoe_pos.routes.common import json_object
from shoe_pos.security import module_required

bp = Blueprint('customers', __name__, url_prefix='/api/customers')


@bp.route('', methods=['POST'])
@module_required('customer', 'customer.create')
def create_customer():
    customer = get_container().customer_service.create_customer(request.get_json(silent=True))
    return jsonify({'message': 'Customer created successfully', 'customer': customer}), 201


@bp.route('/search', methods=['GET'])
@module_required('customer', 'customer.search')
def search_customers():
    return jsonify(get_container().customer_service.search_customers(request.args.get('query')))


@bp.route('', methods=['GET'])
@module_required('customer')
def list_customers():
    return jsonify(get_container().customer_service.list_customers())


@bp.route('/<customer_id>', methods=['GET'])
@module_required('customer')
def get_customer(customer_id):
    return jsonify(get_container().customer_service.get_customer(customer_id))


@bp.route('/<customer_id>', methods=['PUT'])
@module_required('customer')
def update_customer(customer_id):
    customer = get_container().customer_service.update_customer(customer_id, request.get_json(silent=True))
    return jsonify({'message': 'Customer updated successfully', 'customer': customer})


@bp.route('/<customer_id>', methods=['DELETE'])
@module_required('customer')
def delete_customer(customer_id):
    get_container().customer_service.delete_customer(customer_id)
    return jsonify({'message': 'Customer deleted successfully'})


@bp.route('/<customer_id>/loyalty-points', methods=['PATCH'])
@module_required('customer')
def update_loyalty_points(customer_id):
    data = json_object()
    customer = get_container().customer_service.update_loyalty_points(customer_id, data.get('points'))
    return jsonify({'message': 'Loyalty points updated successfully', 'customer': customer})
