# servicios/servicio_pedidos/aplicacion/casos_uso/cambiar_estado_pedido.py

import logging
from datetime import datetime
from typing import Callable, Optional

from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRepositorioPedido
from servicios.servicio_pedidos.dominio.estado import EstadoPedido
from servicios.servicio_pedidos.dominio.excepciones import PedidoNoEncontradoError
from servicios.servicio_pedidos.dominio.pedido import Pedido

logger = logging.getLogger(__name__)


class CambiarEstadoPedido:
    """
    Caso de Uso que mueve un pedido por su ciclo de vida.

    El cambio se guarda con una actualizacion condicional sobre el estado
    leido. Si otro proceso cambio el pedido entre la lectura y la escritura,
    se vuelve a leer y se evalua de nuevo; como el ciclo de vida solo avanza,
    esto termina en pocas vueltas.
    """
    def __init__(self, repositorio: IRepositorioPedido, reloj: Callable[[], datetime] = datetime.now):
        self.repositorio = repositorio
        self.reloj = reloj

    def _obtener(self, pedido_id: str, empresa_id: Optional[str]) -> Pedido:
        pedido = self.repositorio.obtener_por_id(pedido_id)
        if pedido is None or (empresa_id is not None and pedido.empresa_id != empresa_id):
            raise PedidoNoEncontradoError(pedido_id)
        return pedido

    def ejecutar(self,
                 pedido_id: str,
                 nuevo_estado,
                 entregador_id: Optional[str] = None,
                 empresa_id: Optional[str] = None) -> Pedido:
        """
        :param nuevo_estado: EstadoPedido o su valor en texto.
        :param entregador_id: entregador asignado al pasar a 'enviado'.
        :param empresa_id: si se indica, el pedido debe pertenecer a esa empresa.
        :raises PedidoNoEncontradoError: si no existe (o es de otra empresa).
        :raises TransicionIlegalError: si el cambio no es legal desde el estado actual.
        :returns: El pedido con el estado ya aplicado.
        """
        solicitado = EstadoPedido.desde_valor(nuevo_estado)

        while True:
            pedido = self._obtener(pedido_id, empresa_id)

            # Reintento del mismo cambio: no-op
            if pedido.estado is solicitado:
                return pedido

            cambio = pedido.preparar_transicion(solicitado, self.reloj(), entregador_id)
            aplicado = self.repositorio.actualizar_estado_condicional(
                pedido.id,
                cambio.estado_anterior,
                cambio.nuevo_estado,
                asignado_en=cambio.asignado_en,
                entregador_id=cambio.entregador_id,
                finalizado_en=cambio.finalizado_en,
            )
            if aplicado:
                pedido.aplicar(cambio)
                logger.info("Pedido %s: %s -> %s", pedido.numero_pedido,
                            cambio.estado_anterior.value, cambio.nuevo_estado.value)
                return pedido

            logger.warning("Pedido %s cambió de estado durante la transición a %s; reintentando",
                           pedido.numero_pedido, solicitado.value)
