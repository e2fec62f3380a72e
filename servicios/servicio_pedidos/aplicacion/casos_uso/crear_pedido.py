# servicios/servicio_pedidos/aplicacion/casos_uso/crear_pedido.py

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRepositorioPedido
from servicios.servicio_pedidos.dominio.pedido import Direccion, Pedido

logger = logging.getLogger(__name__)


# ==============================================================================
# CASO DE USO: CREAR PEDIDO
# El flete ya debe venir calculado por el estimador; aqui no se recalcula.
# ==============================================================================
class CrearPedido:
    """
    Caso de Uso responsable de validar y registrar un nuevo pedido de entrega.
    """
    def __init__(self, repositorio: IRepositorioPedido, reloj: Callable[[], datetime] = datetime.now):
        """
        Inyeccion de Dependencias:
        - repositorio: El contrato (interfaz) para acceder a la persistencia.
        - reloj: funcion que retorna la fecha/hora actual.
        """
        self.repositorio = repositorio
        self.reloj = reloj

    def ejecutar(self,
                 empresa_id: str,
                 recogida: Direccion,
                 entrega: Direccion,
                 valor_frete: Any,
                 descripcion_producto: Optional[str] = None,
                 valor_producto: Any = None,
                 observaciones: Optional[str] = None) -> Pedido:
        """
        Valida las precondiciones y guarda el pedido con una sola escritura.

        :raises ValidacionPedidoError: direcciones incompletas o flete no calculado.
        :raises EntradaInvalidaError: empresa vacia o montos invalidos.
        :returns: El pedido creado, con su numero_pedido asignado.
        """
        # 1. Validacion y creacion de la entidad (no toca la persistencia)
        pedido = Pedido.crear_nuevo(
            empresa_id=empresa_id,
            recogida=recogida,
            entrega=entrega,
            valor_frete=valor_frete,
            creado_en=self.reloj(),
            descripcion_producto=descripcion_producto,
            valor_producto=valor_producto,
            observaciones=observaciones,
        )

        # 2. Persistencia (una sola escritura; el repositorio asigna el numero)
        creado = self.repositorio.insertar(pedido)
        logger.info("Pedido %s creado para la empresa %s (total %s)",
                    creado.numero_pedido, creado.empresa_id, creado.valor_total)
        return creado
