# servicios/servicio_pedidos/dominio/pedido.py

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional

from servicios.servicio_pedidos.dominio.estado import EstadoPedido, validar_transicion
from servicios.servicio_pedidos.dominio.excepciones import (
    EntradaInvalidaError,
    MotivoValidacion,
    ValidacionPedidoError,
)

CENTAVOS = Decimal("0.01")
# Columnas Numeric(12, 2): como mucho 10 dígitos enteros
MONTO_MAXIMO = Decimal("1e10")


def a_dinero(valor: Any, campo: str = "valor") -> Decimal:
    """Convierte un monto (str, int, float o Decimal) a Decimal con dos decimales."""
    if isinstance(valor, bool):
        raise EntradaInvalidaError(f"El campo '{campo}' debe ser un monto numérico.")
    try:
        # float -> str evita arrastrar el error binario (15.1 -> 15.0999...)
        monto = Decimal(str(valor)) if isinstance(valor, float) else Decimal(valor)
        if not monto.is_finite():
            raise EntradaInvalidaError(f"El campo '{campo}' debe ser un monto finito.")
        monto = monto.quantize(CENTAVOS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise EntradaInvalidaError(f"El campo '{campo}' debe ser un monto numérico.")
    if abs(monto) >= MONTO_MAXIMO:
        raise EntradaInvalidaError(f"El campo '{campo}' excede el monto máximo permitido.")
    return monto


def _texto_opcional(valor: Optional[str]) -> Optional[str]:
    if valor is None:
        return None
    valor = str(valor).strip()
    return valor or None


# ==============================================================================
# VALUE OBJECT: DIRECCION
# Punto de recogida o de entrega. Dirección y ciudad son obligatorias para
# crear un pedido; el resto es informativo.
# ==============================================================================
@dataclass(frozen=True)
class Direccion:
    direccion: str = ""
    ciudad: str = ""
    barrio: Optional[str] = None
    codigo_postal: Optional[str] = None
    contacto: Optional[str] = None
    telefono: Optional[str] = None

    @classmethod
    def desde_dict(cls, data: Optional[Dict[str, Any]]) -> "Direccion":
        """:raises EntradaInvalidaError: si `data` no es un objeto JSON."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise EntradaInvalidaError("La dirección debe ser un objeto con 'direccion' y 'ciudad'.")
        return cls(
            direccion=str(data.get("direccion") or "").strip(),
            ciudad=str(data.get("ciudad") or "").strip(),
            barrio=_texto_opcional(data.get("barrio")),
            codigo_postal=_texto_opcional(data.get("codigo_postal")),
            contacto=_texto_opcional(data.get("contacto")),
            telefono=_texto_opcional(data.get("telefono")),
        )

    @property
    def esta_completa(self) -> bool:
        return bool(self.direccion.strip()) and bool(self.ciudad.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direccion": self.direccion,
            "ciudad": self.ciudad,
            "barrio": self.barrio,
            "codigo_postal": self.codigo_postal,
            "contacto": self.contacto,
            "telefono": self.telefono,
        }


@dataclass(frozen=True)
class CambioEstado:
    """Campos que escribe una transición de estado (lo que el repositorio debe aplicar)."""
    estado_anterior: EstadoPedido
    nuevo_estado: EstadoPedido
    asignado_en: Optional[datetime] = None
    entregador_id: Optional[str] = None
    finalizado_en: Optional[datetime] = None


# ==============================================================================
# ENTIDAD PEDIDO
# ==============================================================================
@dataclass
class Pedido:
    """
    Solicitud de entrega de una empresa, desde la recogida hasta la entrega.

    El id, la empresa, las direcciones y los montos no cambian después de la
    creación; solo el estado, las fechas de asignación/finalización y el
    entregador se modifican a través de las transiciones de estado.
    """
    id: str
    empresa_id: str
    recogida: Direccion
    entrega: Direccion
    valor_frete: Decimal
    valor_producto: Decimal
    valor_total: Decimal
    creado_en: datetime
    estado: EstadoPedido = EstadoPedido.RECIBIDO
    numero_pedido: Optional[str] = None
    descripcion_producto: Optional[str] = None
    observaciones: Optional[str] = None
    asignado_en: Optional[datetime] = None
    finalizado_en: Optional[datetime] = None
    entregador_id: Optional[str] = None

    @classmethod
    def crear_nuevo(cls,
                    empresa_id: str,
                    recogida: Direccion,
                    entrega: Direccion,
                    valor_frete: Any,
                    creado_en: datetime,
                    descripcion_producto: Optional[str] = None,
                    valor_producto: Any = None,
                    observaciones: Optional[str] = None) -> "Pedido":
        """
        Metodo factory: valida las precondiciones en orden y arma el pedido en
        estado RECIBIDO. El numero_pedido lo asigna el repositorio al insertar.

        :raises EntradaInvalidaError: empresa vacía o montos mal formados.
        :raises ValidacionPedidoError: con el motivo de la primera precondición que falla.
        """
        if not str(empresa_id or "").strip():
            raise EntradaInvalidaError("El pedido debe pertenecer a una empresa.")

        # 1. y 2. Direcciones obligatorias
        if recogida is None or not recogida.esta_completa:
            raise ValidacionPedidoError(MotivoValidacion.RECOGIDA_INCOMPLETA)
        if entrega is None or not entrega.esta_completa:
            raise ValidacionPedidoError(MotivoValidacion.ENTREGA_INCOMPLETA)

        # 3. El flete debe haberse calculado antes (y ser positivo)
        if valor_frete is None:
            raise ValidacionPedidoError(MotivoValidacion.FRETE_NO_CALCULADO)
        frete = a_dinero(valor_frete, "valor_frete")
        if frete <= 0:
            raise ValidacionPedidoError(MotivoValidacion.FRETE_NO_CALCULADO)

        producto = a_dinero(valor_producto if valor_producto is not None else 0, "valor_producto")
        if producto < 0:
            raise EntradaInvalidaError("El valor del producto no puede ser negativo.")
        if producto + frete >= MONTO_MAXIMO:
            raise EntradaInvalidaError("El valor total excede el monto máximo permitido.")

        return cls(
            id=str(uuid.uuid4()),
            empresa_id=str(empresa_id).strip(),
            recogida=recogida,
            entrega=entrega,
            valor_frete=frete,
            valor_producto=producto,
            valor_total=producto + frete,
            creado_en=creado_en,
            estado=EstadoPedido.RECIBIDO,
            descripcion_producto=_texto_opcional(descripcion_producto),
            observaciones=_texto_opcional(observaciones),
        )

    def preparar_transicion(self,
                            nuevo_estado: EstadoPedido,
                            ahora: datetime,
                            entregador_id: Optional[str] = None) -> CambioEstado:
        """
        Calcula los campos que cambian al pasar a `nuevo_estado`, sin modificar el pedido.

        :raises TransicionIlegalError: si la transición no es legal.
        """
        validar_transicion(self.estado, nuevo_estado)
        cambio = CambioEstado(estado_anterior=self.estado, nuevo_estado=nuevo_estado)

        if nuevo_estado is EstadoPedido.ENVIADO and entregador_id and self.asignado_en is None:
            cambio = replace(cambio, asignado_en=ahora, entregador_id=entregador_id)
        elif nuevo_estado is EstadoPedido.ENTREGADO:
            cambio = replace(cambio, finalizado_en=ahora)
        return cambio

    def aplicar(self, cambio: CambioEstado) -> None:
        self.estado = cambio.nuevo_estado
        if cambio.asignado_en is not None:
            self.asignado_en = cambio.asignado_en
            self.entregador_id = cambio.entregador_id
        if cambio.finalizado_en is not None:
            self.finalizado_en = cambio.finalizado_en

    def to_dict(self) -> Dict[str, Any]:
        def _fecha(valor: Optional[datetime]) -> Optional[str]:
            return valor.isoformat() if valor else None

        return {
            "id": self.id,
            "numero_pedido": self.numero_pedido,
            "empresa_id": self.empresa_id,
            "status": self.estado.value,
            "recogida": self.recogida.to_dict(),
            "entrega": self.entrega.to_dict(),
            "descripcion_producto": self.descripcion_producto,
            "valor_producto": f"{self.valor_producto:.2f}",
            "valor_frete": f"{self.valor_frete:.2f}",
            "valor_total": f"{self.valor_total:.2f}",
            "observaciones": self.observaciones,
            "creado_en": _fecha(self.creado_en),
            "asignado_en": _fecha(self.asignado_en),
            "finalizado_en": _fecha(self.finalizado_en),
            "entregador_id": self.entregador_id,
        }

    def __str__(self):
        return f"Pedido(ID: {self.id}, Numero: {self.numero_pedido}, Estado: {self.estado.value})"
