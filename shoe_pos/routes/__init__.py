# ==============================================================================
# RUTAS DE LA API
# ==============================================================================
# Cada módulo define un Blueprint. Las rutas solo orquestan:
# request → servicio → jsonify. Los errores de servicio los traduce main.py.
# ==============================================================================

from shoe_pos.routes import auth, customers, products, sales

BLUEPRINTS = (
    auth.bp,
    products.bp,
    customers.bp,
    sales.bp,
)

__all__ = ['BLUEPRINTS']
