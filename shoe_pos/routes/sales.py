# ==============================================================================
# RUTAS DE VENTAS  (/api/sales)
# ==============================================================================
# Todas exigen el módulo sales. El usuario que procesa la venta sale del
# token, nunca del cuerpo de la petición.
# ==============================================================================

from flask import Blueprint, g, jsonify

from shoe_pos.app_container import get_container
from shoe_pos.routes.common import json_object
from shoe_pos.security import module_required
from shoe_pos.services.sales_service import INVALID_BODY_MESSAGE

bp = Blueprint('sales', __name__, url_prefix='/api/sales')


@bp.route('', methods=['POST'])
@module_required('sales')
def create_sale():
    data = json_object(INVALID_BODY_MESSAGE)
    result = get_container().sales_service.create_sale(
        customer_id=data.get('customerId'),
        items=data.get('items'),
        payment_method=data.get('paymentMethod'),
        actor_id=g.current_user.id,
    )
    return jsonify({'message': 'Sale completed successfully', **result}), 201


@bp.route('', methods=['GET'])
@module_required('sales')
def list_sales():
    return jsonify(get_container().sales_service.list_sales())


@bp.route('/<sale_id>', methods=['GET'])
@module_required('sales')
def get_sale(sale_id):
    return jsonify(get_container().sales_service.get_sale(sale_id))


@bp.route('/report', methods=['POST'])
@module_required('sales')
def sales_report():
    data = json_object()
    report = get_container().report_service.sales_report(data.get('startDate'), data.get('endDate'))
    return jsonify(report)
