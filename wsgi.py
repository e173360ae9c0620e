# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# Este archivo es el punto de entrada para servidores WSGI como Gunicorn.
#
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── shoe_pos/        <- Paquete Python
#       ├── main.py      <- create_app()
#       ├── routes/
#       ├── services/
#       └── repositories/
#
# La configuración llega por variables de entorno (ver shoe_pos/config.py).
# ==============================================================================

import os

from shoe_pos.main import create_app

app = create_app()

# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================
# Para desarrollo local:
#   python wsgi.py
# ==============================================================================

if __name__ == '__main__':
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
    PORT = int(os.environ.get('FLASK_PORT', 5000))
    app.run(debug=DEBUG, host=HOST, port=PORT)
