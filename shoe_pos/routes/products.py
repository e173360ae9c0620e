# ==============================================================================
# RUTAS DE PRODUCTOS E INVENTARIO  (/api/products)
# ==============================================================================
# Listado y búsqueda también están abiertos a quien tenga products.view /
# products.search (cajeros). El resto exige el módulo inventory.
# ==============================================================================

import math

from flask import Blueprint, jsonify, request

from shoe_pos.app_container import get_container
from shoe_pos.routes.common import json_object
from shoe_pos.security import module_required
from shoe_pos.services.errors import ValidationError

bp = Blueprint('products', __name__, url_prefix='/api/products')


def _price_arg(name):
    """Parámetro numérico opcional del query string."""
    raw = request.args.get(name)
    if raw in (None, ''):
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f'Invalid {name} value')
    if not math.isfinite(value):
        raise ValidationError(f'Invalid {name} value')
    return value


@bp.route('', methods=['GET'])
@module_required('inventory', 'products.view')
def list_products():
    return jsonify(get_container().inventory_service.list_products())


@bp.route('/search', methods=['GET'])
@module_required('inventory', 'products.search')
def search_products():
    products = get_container().inventory_service.search_products(
        query=request.args.get('query'),
        category=request.args.get('category'),
        gender=request.args.get('gender'),
        brand=request.args.get('brand'),
        min_price=_price_arg('minPrice'),
        max_price=_price_arg('maxPrice'),
    )
    return jsonify(products)


@bp.route('', methods=['POST'])
@module_required('inventory')
def create_product():
    product = get_container().inventory_service.create_product(request.get_json(silent=True))
    return jsonify({'message': 'Product created successfully', 'product': product}), 201


@bp.route('/low-stock', methods=['GET'])
@module_required('inventory')
def low_stock_products():
    return jsonify(get_container().inventory_service.get_low_stock_products())


@bp.route('/inventory-report', methods=['GET'])
@module_required('inventory')
def inventory_report():
    return jsonify(get_container().inventory_service.inventory_report())


@bp.route('/<product_id>', methods=['GET'])
@module_required('inventory')
def get_product(product_id):
    return jsonify(get_container().inventory_service.get_product(product_id))


@bp.route('/<product_id>', methods=['PUT'])
@module_required('inventory')
def update_product(product_id):
    product = get_container().inventory_service.update_product(product_id, request.get_json(silent=True))
    return jsonify({'message': 'Product updated successfully', 'product': product})


@bp.route('/<product_id>', methods=['DELETE'])
@module_required('inventory')
def delete_product(product_id):
    get_container().inventory_service.delete_product(product_id)
    return jsonify({'message': 'Product deleted successfully'})


@bp.route('/<product_id>/stock', methods=['PATCH'])
@module_required('inventory')
def update_stock(product_id):
    data = json_object()
    product = get_container().inventory_service.update_stock(
        product_id, data.get('size'), data.get('quantity')
    )
    return jsonify({'message': 'Stock updated successfully', 'product': product})
