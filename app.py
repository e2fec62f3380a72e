# app.py
from datetime import datetime

from flask import Flask, jsonify, current_app
from werkzeug.exceptions import HTTPException
from flask_cors import CORS
import logging

from configuracion import Config
from inicializar_db import inicializar_base_datos
from servicios.servicio_pedidos.presentacion.rutas import crear_pedidos_bp
from servicios.servicio_pedidos.infraestructura.persistencia.sqlalchemy_repositorio_pedido import SQLAlchemyRepositorioPedido
from servicios.servicio_pedidos.infraestructura.logistica.estimador_frete_simulado import EstimadorFreteSimulado


def crear_app(config_extra=None, repositorio=None, estimador=None, reloj=None):
    """
    Fábrica de la aplicación.
    repositorio/estimador/reloj se pueden inyectar (p.ej. en pruebas); si no,
    se usa SQLAlchemy con la URI configurada y el estimador simulado.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_extra:
        app.config.update(config_extra)

    # Habilitar CORS para la API
    # CORS_ORIGINS: lista separada por comas, p.ej. "https://mi-portal.com,https://otro.com"
    cors_env = app.config.get("CORS_ORIGINS") or "*"
    allowed = [o.strip() for o in cors_env.split(",") if o.strip()] if cors_env != "*" else "*"
    CORS(app, resources={r"/api/*": {"origins": allowed}})

    # Logging básico para producción
    log_level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    if not app.logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        app.logger.addHandler(handler)
    app.logger.setLevel(getattr(logging, log_level, logging.INFO))
    logging.getLogger("servicios").setLevel(getattr(logging, log_level, logging.INFO))

    app.json.ensure_ascii = bool(app.config.get("JSON_ENSURE_ASCII", False))

    # Evitar redirecciones 308 por barra final en rutas
    app.url_map.strict_slashes = False

    if repositorio is None:
        inicializar_base_datos(app.config["SQLALCHEMY_DATABASE_URI"])
        repositorio = SQLAlchemyRepositorioPedido(app.config["SQLALCHEMY_DATABASE_URI"])
    if estimador is None:
        estimador = EstimadorFreteSimulado(
            base=app.config.get("FRETE_BASE"),
            variacion_maxima=app.config.get("FRETE_VARIACION_MAX"),
        )

    # Blueprints
    app.register_blueprint(crear_pedidos_bp(repositorio, estimador, reloj=reloj or datetime.now))

    # ----------------- Rutas base -----------------
    @app.get("/")
    def salud():
        return jsonify({"status": "ok", "mensaje": "Portal de pedidos de entrega"}), 200

    @app.errorhandler(404)
    def pagina_no_encontrada(_error):
        return jsonify({"ok": False, "error": "Ruta no encontrada"}), 404

    @app.errorhandler(405)
    def metodo_no_permitido(_error):
        return jsonify({"ok": False, "error": "Método no permitido"}), 405

    @app.errorhandler(Exception)
    def _unhandled(e):
        if isinstance(e, HTTPException):
            return jsonify({"ok": False, "error": e.description}), e.code
        current_app.logger.exception("Unhandled")
        return {"ok": False, "error": "server_error"}, 500

    return app


if __name__ == "__main__":
    app = crear_app()
    app.logger.info("Iniciando servidor Flask en http://127.0.0.1:5000/")
    app.run(debug=True)
