# servicios/servicio_pedidos/aplicacion/repositorios/repositorio_pedido_interface.py

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from servicios.servicio_pedidos.dominio.estado import EstadoPedido
from servicios.servicio_pedidos.dominio.pedido import Pedido


# ==============================================================================
# INTERFAZ (Contrato)
# Toda implementacion de persistencia de pedidos debe seguir este contrato.
# Cada metodo es atomico por si mismo; los fallos de infraestructura se
# reportan como ErrorRepositorio.
# ==============================================================================
class IRepositorioPedido(ABC):

    @abstractmethod
    def insertar(self, pedido: Pedido) -> Pedido:
        """
        Guarda un pedido nuevo y le asigna el numero_pedido en la misma escritura.
        Retorna el pedido con el numero asignado.
        """
        raise NotImplementedError

    @abstractmethod
    def obtener_por_id(self, pedido_id: str) -> Optional[Pedido]:
        """Busca y retorna un pedido por su ID."""
        raise NotImplementedError

    @abstractmethod
    def actualizar_estado_condicional(self,
                                      pedido_id: str,
                                      estado_esperado: EstadoPedido,
                                      nuevo_estado: EstadoPedido,
                                      *,
                                      asignado_en: Optional[datetime] = None,
                                      entregador_id: Optional[str] = None,
                                      finalizado_en: Optional[datetime] = None) -> bool:
        """
        Cambia el estado solo si el estado guardado sigue siendo `estado_esperado`.
        Los campos de fecha/entregador en None no se modifican.
        Retorna False si otro proceso cambió el pedido antes.
        """
        raise NotImplementedError

    @abstractmethod
    def listar_por_empresa(self,
                           empresa_id: str,
                           estados: Optional[Iterable[EstadoPedido]] = None) -> List[Pedido]:
        """Pedidos de la empresa, del más reciente al más antiguo."""
        raise NotImplementedError

    @abstractmethod
    def contar_por_empresa(self,
                           empresa_id: str,
                           estados: Optional[Iterable[EstadoPedido]] = None,
                           finalizado_desde: Optional[datetime] = None,
                           finalizado_hasta: Optional[datetime] = None) -> int:
        """
        Cuenta pedidos de la empresa. El filtro de finalizacion es un intervalo
        semiabierto: finalizado_desde <= finalizado_en < finalizado_hasta.
        """
        raise NotImplementedError
