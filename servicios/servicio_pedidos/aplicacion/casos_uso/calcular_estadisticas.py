# servicios/servicio_pedidos/aplicacion/casos_uso/calcular_estadisticas.py
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Dict, Tuple

from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRepositorioPedido
from servicios.servicio_pedidos.dominio.estado import ESTADOS_ACTIVOS, EstadoPedido
from servicios.servicio_pedidos.dominio.excepciones import ErrorRepositorio, EstadisticasNoDisponiblesError


@dataclass(frozen=True)
class EstadisticasPedidos:
    activos: int
    entregados_hoy: int
    total: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def rango_del_dia(referencia: datetime) -> Tuple[datetime, datetime]:
    """[medianoche, medianoche del día siguiente) en el calendario de `referencia`."""
    inicio = referencia.replace(hour=0, minute=0, second=0, microsecond=0)
    return inicio, inicio + timedelta(days=1)


@dataclass
class CalcularEstadisticas:
    """
    Caso de uso de solo lectura para los contadores del panel de la empresa.
    Cada llamada consulta el repositorio; no se guarda nada en cache.
    """
    repositorio: IRepositorioPedido

    def ejecutar(self, empresa_id: str, referencia: datetime) -> EstadisticasPedidos:
        inicio, fin = rango_del_dia(referencia)
        try:
            activos = self.repositorio.contar_por_empresa(empresa_id, estados=ESTADOS_ACTIVOS)
            entregados_hoy = self.repositorio.contar_por_empresa(
                empresa_id,
                estados=[EstadoPedido.ENTREGADO],
                finalizado_desde=inicio,
                finalizado_hasta=fin,
            )
            total = self.repositorio.contar_por_empresa(empresa_id)
        except ErrorRepositorio as e:
            raise EstadisticasNoDisponiblesError(
                f"No se pudieron calcular las estadísticas de la empresa {empresa_id}. Causa: {e.mensaje}"
            ) from e

        return EstadisticasPedidos(activos=activos, entregados_hoy=entregados_hoy, total=total)
