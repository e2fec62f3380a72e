# servicios/servicio_pedidos/presentacion/rutas.py
from datetime import datetime
from typing import Callable

from flask import Blueprint, current_app, g, jsonify, request

from decorators import empresa_requerida
from servicios.servicio_pedidos.aplicacion.casos_uso.calcular_estadisticas import CalcularEstadisticas
from servicios.servicio_pedidos.aplicacion.casos_uso.cambiar_estado_pedido import CambiarEstadoPedido
from servicios.servicio_pedidos.aplicacion.casos_uso.crear_pedido import CrearPedido
from servicios.servicio_pedidos.aplicacion.casos_uso.listar_pedidos import ListarPedidos
from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRepositorioPedido
from servicios.servicio_pedidos.aplicacion.servicios.estimador_frete_interface import IEstimadorFrete
from servicios.servicio_pedidos.dominio.excepciones import (
    EntradaInvalidaError,
    ErrorRepositorio,
    EstadisticasNoDisponiblesError,
    PedidoNoEncontradoError,
    TransicionIlegalError,
    ValidacionPedidoError,
)
from servicios.servicio_pedidos.dominio.pedido import Direccion


def _json_body() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def crear_pedidos_bp(repositorio: IRepositorioPedido,
                     estimador: IEstimadorFrete,
                     reloj: Callable[[], datetime] = datetime.now) -> Blueprint:
    """
    Construye el Blueprint de pedidos con las dependencias inyectadas.
    Rutas bajo /api/v1/pedidos; todas exigen la cabecera de empresa.
    """
    pedidos_bp = Blueprint('pedidos_bp', __name__, url_prefix='/api/v1/pedidos')

    crear_pedido_uc = CrearPedido(repositorio=repositorio, reloj=reloj)
    cambiar_estado_uc = CambiarEstadoPedido(repositorio=repositorio, reloj=reloj)
    estadisticas_uc = CalcularEstadisticas(repositorio=repositorio)
    listar_uc = ListarPedidos(repositorio=repositorio)

    # ----------------------------------------------------------------------
    # ERRORES DE DOMINIO -> HTTP
    # ----------------------------------------------------------------------
    @pedidos_bp.errorhandler(ValidacionPedidoError)
    def _validacion(e: ValidacionPedidoError):
        return jsonify({"ok": False, "error": e.mensaje, "motivo": e.motivo.value}), 400

    @pedidos_bp.errorhandler(EntradaInvalidaError)
    def _entrada_invalida(e: EntradaInvalidaError):
        return jsonify({"ok": False, "error": e.mensaje}), 400

    @pedidos_bp.errorhandler(PedidoNoEncontradoError)
    def _no_encontrado(e: PedidoNoEncontradoError):
        return jsonify({"ok": False, "error": e.mensaje}), 404

    @pedidos_bp.errorhandler(TransicionIlegalError)
    def _transicion_ilegal(e: TransicionIlegalError):
        return jsonify({
            "ok": False,
            "error": e.mensaje,
            "estado_actual": e.estado_actual.value,
            "estado_solicitado": e.estado_solicitado.value,
        }), 409

    @pedidos_bp.errorhandler(EstadisticasNoDisponiblesError)
    @pedidos_bp.errorhandler(ErrorRepositorio)
    def _no_disponible(e):
        current_app.logger.warning("Repositorio de pedidos no disponible: %s", e.mensaje)
        return jsonify({"ok": False, "error": e.mensaje, "reintentar": True}), 503

    # ----------------------------------------------------------------------
    # RUTAS
    # ----------------------------------------------------------------------
    @pedidos_bp.route('/frete', methods=['POST'])
    @empresa_requerida
    def calcular_frete():
        data = _json_body()
        valor_frete = estimador.estimar(data.get('ciudad_recogida'), data.get('ciudad_entrega'))
        return jsonify({
            "ok": True,
            "valor_frete": f"{valor_frete:.2f}",
            "moneda": current_app.config.get("MONEDA", "BRL"),
        }), 200

    @pedidos_bp.route('', methods=['POST'])
    @empresa_requerida
    def crear_pedido():
        data = _json_body()
        pedido = crear_pedido_uc.ejecutar(
            empresa_id=g.empresa_id,
            recogida=Direccion.desde_dict(data.get('recogida')),
            entrega=Direccion.desde_dict(data.get('entrega')),
            valor_frete=data.get('valor_frete'),
            descripcion_producto=data.get('descripcion_producto'),
            valor_producto=data.get('valor_producto'),
            observaciones=data.get('observaciones'),
        )
        return jsonify({
            "ok": True,
            "mensaje": f"Pedido {pedido.numero_pedido} creado con éxito.",
            "pedido": pedido.to_dict(),
        }), 201

    @pedidos_bp.route('', methods=['GET'])
    @empresa_requerida
    def listar_pedidos():
        pedidos = listar_uc.ejecutar(g.empresa_id, request.args.get('status'))
        return jsonify({"ok": True, "items": [p.to_dict() for p in pedidos]}), 200

    @pedidos_bp.route('/estadisticas', methods=['GET'])
    @empresa_requerida
    def estadisticas():
        referencia_txt = (request.args.get('referencia') or '').strip()
        if referencia_txt:
            try:
                referencia = datetime.fromisoformat(referencia_txt)
            except ValueError:
                raise EntradaInvalidaError("El parámetro 'referencia' debe ser una fecha ISO 8601.")
        else:
            referencia = reloj()
        stats = estadisticas_uc.ejecutar(g.empresa_id, referencia)
        return jsonify({"ok": True, **stats.to_dict()}), 200

    @pedidos_bp.route('/<string:pedido_id>', methods=['GET'])
    @empresa_requerida
    def obtener_pedido(pedido_id: str):
        pedido = listar_uc.obtener(g.empresa_id, pedido_id)
        return jsonify({"ok": True, "pedido": pedido.to_dict()}), 200

    @pedidos_bp.route('/<string:pedido_id>/estado', methods=['POST'])
    @empresa_requerida
    def cambiar_estado(pedido_id: str):
        data = _json_body()
        if not data.get('status'):
            raise EntradaInvalidaError("Falta el campo 'status'.")
        pedido = cambiar_estado_uc.ejecutar(
            pedido_id,
            data['status'],
            entregador_id=data.get('entregador_id'),
            empresa_id=g.empresa_id,
        )
        return jsonify({"ok": True, "pedido": pedido.to_dict()}), 200

    return pedidos_bp
