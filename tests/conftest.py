import copy
import random
import threading
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from inicializar_db import Base
from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRepositorioPedido
from servicios.servicio_pedidos.dominio.pedido import Direccion
from servicios.servicio_pedidos.infraestructura.logistica.estimador_frete_simulado import EstimadorFreteSimulado
from servicios.servicio_pedidos.infraestructura.persistencia.sqlalchemy_repositorio_pedido import (
    SQLAlchemyRepositorioPedido,
    formatear_numero_pedido,
)


class RepositorioPedidoEnMemoria(IRepositorioPedido):
    """Repositorio falso: guarda copias de los pedidos en un dict protegido por un lock."""

    def __init__(self):
        self._pedidos = {}
        self._secuencia = 0
        self._lock = threading.Lock()
        self.escrituras = 0

    def insertar(self, pedido):
        with self._lock:
            self._secuencia += 1
            guardado = copy.deepcopy(pedido)
            guardado.numero_pedido = formatear_numero_pedido(self._secuencia)
            self._pedidos[guardado.id] = guardado
            self.escrituras += 1
            return copy.deepcopy(guardado)

    def obtener_por_id(self, pedido_id):
        with self._lock:
            pedido = self._pedidos.get(pedido_id)
            return copy.deepcopy(pedido) if pedido else None

    def actualizar_estado_condicional(self, pedido_id, estado_esperado, nuevo_estado, *,
                                      asignado_en=None, entregador_id=None, finalizado_en=None):
        with self._lock:
            pedido = self._pedidos.get(pedido_id)
            if pedido is None or pedido.estado is not estado_esperado:
                return False
            pedido.estado = nuevo_estado
            if asignado_en is not None:
                pedido.asignado_en = asignado_en
            if entregador_id is not None:
                pedido.entregador_id = entregador_id
            if finalizado_en is not None:
                pedido.finalizado_en = finalizado_en
            self.escrituras += 1
            return True

    def _filtrar(self, empresa_id, estados):
        estados = None if estados is None else set(estados)
        return [
            p for p in self._pedidos.values()
            if p.empresa_id == empresa_id and (estados is None or p.estado in estados)
        ]

    def listar_por_empresa(self, empresa_id, estados=None):
        with self._lock:
            pedidos = self._filtrar(empresa_id, estados)
            pedidos.sort(key=lambda p: p.creado_en, reverse=True)
            return [copy.deepcopy(p) for p in pedidos]

    def contar_por_empresa(self, empresa_id, estados=None, finalizado_desde=None, finalizado_hasta=None):
        with self._lock:
            pedidos = self._filtrar(empresa_id, estados)
        if finalizado_desde is not None:
            pedidos = [p for p in pedidos if p.finalizado_en is not None and p.finalizado_en >= finalizado_desde]
        if finalizado_hasta is not None:
            pedidos = [p for p in pedidos if p.finalizado_en is not None and p.finalizado_en < finalizado_hasta]
        return len(pedidos)

    def total_guardados(self):
        return len(self._pedidos)


class RelojFijo:
    def __init__(self, ahora):
        self.ahora = ahora

    def __call__(self):
        return self.ahora


@pytest.fixture
def repositorio():
    return RepositorioPedidoEnMemoria()


@pytest.fixture
def reloj():
    return RelojFijo(datetime(2026, 10, 18, 10, 30))


@pytest.fixture
def estimador():
    return EstimadorFreteSimulado(base=Decimal("15.00"), variacion_maxima=Decimal("20.00"),
                                  generador=random.Random(42))


@pytest.fixture
def recogida():
    return Direccion(direccion="Rua das Flores, 120", ciudad="São Paulo", barrio="Centro",
                     contacto="Ana", telefono="(11) 99999-0000")


@pytest.fixture
def entrega():
    return Direccion(direccion="Av. Atlântica, 500", ciudad="Rio de Janeiro", codigo_postal="22010-000")


@pytest.fixture
def engine_sqlite():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repositorio_sqlalchemy(engine_sqlite):
    return SQLAlchemyRepositorioPedido(engine=engine_sqlite)
