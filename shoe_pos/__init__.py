# ==============================================================================
# SHOE POS - Backend de punto de venta e inventario para calzado
# ==============================================================================
# Paquete principal. La aplicación Flask se construye con create_app()
# (ver main.py); wsgi.py en la raíz del repositorio la expone a Gunicorn.
# ==============================================================================

__version__ = '1.0.0'
