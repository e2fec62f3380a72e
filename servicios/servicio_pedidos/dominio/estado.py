# servicios/servicio_pedidos/dominio/estado.py

import enum
from typing import Dict, FrozenSet

from servicios.servicio_pedidos.dominio.excepciones import EntradaInvalidaError, TransicionIlegalError


# ==============================================================================
# ESTADOS DEL PEDIDO
# recibido -> enviado -> en_camino -> entregado, y cancelado desde cualquier
# estado no terminal.
# ==============================================================================
class EstadoPedido(enum.Enum):
    RECIBIDO = "recibido"
    ENVIADO = "enviado"
    EN_CAMINO = "en_camino"
    ENTREGADO = "entregado"
    CANCELADO = "cancelado"

    @classmethod
    def desde_valor(cls, valor) -> "EstadoPedido":
        """Acepta un EstadoPedido o su valor en texto ('en_camino', 'ENTREGADO'...)."""
        if isinstance(valor, cls):
            return valor
        try:
            return cls(str(valor or "").strip().lower())
        except ValueError:
            raise EntradaInvalidaError(f"Estado de pedido desconocido: '{valor}'.")

    @property
    def es_terminal(self) -> bool:
        return not TRANSICIONES_PERMITIDAS[self]

    @property
    def es_activo(self) -> bool:
        return self in ESTADOS_ACTIVOS


TRANSICIONES_PERMITIDAS: Dict[EstadoPedido, FrozenSet[EstadoPedido]] = {
    EstadoPedido.RECIBIDO: frozenset({EstadoPedido.ENVIADO, EstadoPedido.CANCELADO}),
    EstadoPedido.ENVIADO: frozenset({EstadoPedido.EN_CAMINO, EstadoPedido.CANCELADO}),
    EstadoPedido.EN_CAMINO: frozenset({EstadoPedido.ENTREGADO, EstadoPedido.CANCELADO}),
    EstadoPedido.ENTREGADO: frozenset(),
    EstadoPedido.CANCELADO: frozenset(),
}

ESTADOS_ACTIVOS: FrozenSet[EstadoPedido] = frozenset(
    {EstadoPedido.RECIBIDO, EstadoPedido.ENVIADO, EstadoPedido.EN_CAMINO}
)


def transicion_permitida(actual: EstadoPedido, solicitado: EstadoPedido) -> bool:
    return solicitado in TRANSICIONES_PERMITIDAS[actual]


def validar_transicion(actual: EstadoPedido, solicitado: EstadoPedido) -> None:
    """
    Regla de negocio: verifica que el cambio de estado sea legal.
    No valida el caso actual == solicitado (eso lo resuelve el caso de uso como no-op).

    :raises TransicionIlegalError: si la transicion no está en la tabla.
    """
    if not transicion_permitida(actual, solicitado):
        raise TransicionIlegalError(actual, solicitado)
