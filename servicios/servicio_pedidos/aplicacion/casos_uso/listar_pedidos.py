# servicios/servicio_pedidos/aplicacion/casos_uso/listar_pedidos.py
from dataclasses import dataclass
from typing import List

from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRepositorioPedido
from servicios.servicio_pedidos.dominio.estado import EstadoPedido
from servicios.servicio_pedidos.dominio.excepciones import PedidoNoEncontradoError
from servicios.servicio_pedidos.dominio.pedido import Pedido


@dataclass
class ListarPedidos:
    """Consulta de los pedidos de una empresa (listado y detalle)."""
    repositorio: IRepositorioPedido

    def ejecutar(self, empresa_id: str, estado=None) -> List[Pedido]:
        # estado None o "all" = todos los estados
        if estado is None or (isinstance(estado, str) and estado.strip().lower() in ("", "all")):
            return self.repositorio.listar_por_empresa(empresa_id)
        return self.repositorio.listar_por_empresa(empresa_id, estados=[EstadoPedido.desde_valor(estado)])

    def obtener(self, empresa_id: str, pedido_id: str) -> Pedido:
        pedido = self.repositorio.obtener_por_id(pedido_id)
        if pedido is None or pedido.empresa_id != empresa_id:
            raise PedidoNoEncontradoError(pedido_id)
        return pedido
