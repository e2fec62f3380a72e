# servicios/servicio_pedidos/dominio/excepciones.py

import enum


class ExcepcionDominio(Exception):
    """Clase base para todas las excepciones del servicio de pedidos."""
    def __init__(self, mensaje: str = "Error en el servicio de pedidos."):
        self.mensaje = mensaje
        super().__init__(self.mensaje)


class EntradaInvalidaError(ExcepcionDominio):
    """Un campo requerido falta o tiene un formato invalido."""
    def __init__(self, mensaje="Los datos de entrada proporcionados son inválidos."):
        super().__init__(mensaje)


class MotivoValidacion(enum.Enum):
    RECOGIDA_INCOMPLETA = "recogida_incompleta"
    ENTREGA_INCOMPLETA = "entrega_incompleta"
    FRETE_NO_CALCULADO = "frete_no_calculado"


_MENSAJES_VALIDACION = {
    MotivoValidacion.RECOGIDA_INCOMPLETA: "La dirección y la ciudad de recogida son obligatorias.",
    MotivoValidacion.ENTREGA_INCOMPLETA: "La dirección y la ciudad de entrega son obligatorias.",
    MotivoValidacion.FRETE_NO_CALCULADO: "Es necesario calcular el flete antes de crear el pedido.",
}


class ValidacionPedidoError(ExcepcionDominio):
    """Excepción lanzada cuando no se cumplen las precondiciones para crear un pedido."""
    def __init__(self, motivo: MotivoValidacion):
        self.motivo = motivo
        super().__init__(_MENSAJES_VALIDACION[motivo])


class TransicionIlegalError(ExcepcionDominio):
    """El cambio de estado solicitado no está permitido desde el estado actual."""
    def __init__(self, estado_actual, estado_solicitado):
        self.estado_actual = estado_actual
        self.estado_solicitado = estado_solicitado
        super().__init__(
            f"No se puede pasar de '{estado_actual.value}' a '{estado_solicitado.value}'."
        )


class PedidoNoEncontradoError(ExcepcionDominio):
    def __init__(self, pedido_id: str):
        self.pedido_id = pedido_id
        super().__init__(f"Pedido con ID {pedido_id} no encontrado.")


class ErrorRepositorio(ExcepcionDominio):
    """Fallo de la persistencia (conexión, permisos, etc.)."""
    def __init__(self, mensaje="No se pudo acceder al repositorio de pedidos."):
        super().__init__(mensaje)


class EstadisticasNoDisponiblesError(ExcepcionDominio):
    """No se pudieron leer los pedidos para calcular las estadísticas. Se puede reintentar."""
    def __init__(self, mensaje="Las estadísticas no están disponibles en este momento."):
        super().__init__(mensaje)
