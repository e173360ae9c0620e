# ==============================================================================
# APLICACIÓN FLASK - Punto de armado
# ==============================================================================
# create_app() arma la aplicación completa:
#   1. Configuración (variables de entorno + overrides)
#   2. Logging y profiling
#   3. CORS para /api/*
#   4. Contenedor de dependencias (repositorios y servicios)
#   5. Blueprints de la API
#   6. Manejadores de error → JSON {message, ...}
#   7. Headers de seguridad
# ==============================================================================

import logging
import os

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from shoe_pos import __version__
from shoe_pos.app_container import AppContainer
from shoe_pos.config import Config
from shoe_pos.logger import log_startup, setup_logging
from shoe_pos.performance_logger import init_profiling
from shoe_pos.routes import BLUEPRINTS
from shoe_pos.services.errors import ServiceError

logger = logging.getLogger('shoe_pos')


def create_app(overrides=None):
    """
    Crea y configura la aplicación.

    Args:
        overrides: Valores de configuración que reemplazan a los del entorno
                   (los tests pasan DATA_DIR, LOG_DIR, SECRET_KEY...)

    Returns:
        Aplicación Flask lista para servir
    """
    config = Config(overrides)

    app = Flask(__name__)
    app.config.update(config.to_flask())
    app.json.sort_keys = False

    # ═══════════════════════════════════════════════════════════════════════
    # LOGGING Y PROFILING
    # ═══════════════════════════════════════════════════════════════════════
    setup_logging(config.LOG_DIR, config.LOG_LEVEL)
    log_startup(config)
    if config.PRODUCTION_MODE and config.uses_default_secret:
        logger.warning('PRODUCTION_MODE activo sin SHOE_POS_SECRET_KEY definida')
        logger.warning('Define la variable de entorno para mayor seguridad')
    init_profiling(app, config.LOG_DIR)

    CORS(app, resources={r'/api/*': {'origins': config.CORS_ORIGINS}})

    # ═══════════════════════════════════════════════════════════════════════
    # CONTENEDOR DE DEPENDENCIAS
    # ═══════════════════════════════════════════════════════════════════════
    # Una instancia nueva por aplicación: cada test usa su carpeta de datos
    os.makedirs(config.DATA_DIR, exist_ok=True)
    AppContainer.reset_instance()
    AppContainer.install(config.DATA_DIR, config.SECRET_KEY, config.TOKEN_MAX_AGE)

    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)

    _register_error_handlers(app)
    _register_security_headers(app)

    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok', 'version': __version__})

    return app


def _register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        if error.status_code >= 500:
            logger.error('%s %s → %s (%s)', request.method, request.path, error.message,
                         error.extra.get('error', ''))
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception('Error no controlado en %s %s', request.method, request.path)
        return jsonify({'message': 'Something went wrong!'}), 500


def _register_security_headers(app):
    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=()'
        # HSTS solo con HTTPS real
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response
