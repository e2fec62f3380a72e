# servicios/servicio_pedidos/infraestructura/logistica/estimador_frete_simulado.py

import logging
import random
from decimal import Decimal
from typing import Optional

from configuracion import Config
from servicios.servicio_pedidos.aplicacion.servicios.estimador_frete_interface import IEstimadorFrete
from servicios.servicio_pedidos.dominio.excepciones import EntradaInvalidaError
from servicios.servicio_pedidos.dominio.pedido import a_dinero

logger = logging.getLogger(__name__)


# ==============================================================================
# ESTIMADOR DE FLETE SIMULADO
# Tarifa base fija + un adicional aleatorio que simula la distancia.
# ==============================================================================
class EstimadorFreteSimulado(IEstimadorFrete):
    """
    Servicio de Infraestructura que simula el cálculo del flete.
    En la práctica, esto usaría un API de rutas con la distancia real entre
    las ciudades; aquí las ciudades solo se validan.

    Como el adicional es aleatorio, dos llamadas con las mismas ciudades pueden
    dar valores distintos: el flete se calcula una vez y se guarda en el pedido.
    """

    def __init__(self,
                 base: Optional[Decimal] = None,
                 variacion_maxima: Optional[Decimal] = None,
                 generador: Optional[random.Random] = None):
        self.base = a_dinero(base if base is not None else Config.FRETE_BASE, "FRETE_BASE")
        self.variacion_maxima = a_dinero(
            variacion_maxima if variacion_maxima is not None else Config.FRETE_VARIACION_MAX,
            "FRETE_VARIACION_MAX",
        )
        if self.base <= 0:
            raise ValueError("FRETE_BASE debe ser mayor que cero.")
        if self.variacion_maxima < 0:
            raise ValueError("FRETE_VARIACION_MAX no puede ser negativo.")
        self.generador = generador or random.Random()

    def estimar(self, ciudad_recogida: str, ciudad_entrega: str) -> Decimal:
        if not str(ciudad_recogida or "").strip():
            raise EntradaInvalidaError("La ciudad de recogida es obligatoria para calcular el flete.")
        if not str(ciudad_entrega or "").strip():
            raise EntradaInvalidaError("La ciudad de entrega es obligatoria para calcular el flete.")

        adicional = a_dinero(self.generador.uniform(0, float(self.variacion_maxima)), "adicional")
        # uniform() puede devolver el extremo superior por redondeo
        adicional = min(adicional, self.variacion_maxima)
        frete = self.base + adicional

        logger.debug("Flete %s -> %s: %s", ciudad_recogida, ciudad_entrega, frete)
        return frete
