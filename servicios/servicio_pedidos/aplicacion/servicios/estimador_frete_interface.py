from abc import ABC, abstractmethod
from decimal import Decimal


class IEstimadorFrete(ABC):
    """
    Define el contrato para calcular el valor del flete de un pedido.
    Desacopla los casos de uso de la implementación concreta (simulada, por
    distancia, API de una transportadora, etc.).
    """

    @abstractmethod
    def estimar(self, ciudad_recogida: str, ciudad_entrega: str) -> Decimal:
        """
        Calcula el flete entre dos ciudades.

        Args:
            ciudad_recogida (str): Ciudad donde se recoge el paquete.
            ciudad_entrega (str): Ciudad de destino.

        Returns:
            Decimal: valor positivo con dos decimales.

        Raises:
            EntradaInvalidaError: si alguna de las ciudades está vacía.
        """
        raise NotImplementedError
