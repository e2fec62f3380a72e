# servicios/servicio_pedidos/infraestructura/persistencia/sqlalchemy_repositorio_pedido.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import create_engine, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from configuracion import Config
from inicializar_db import PedidoORM
from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRepositorioPedido
from servicios.servicio_pedidos.dominio.estado import EstadoPedido
from servicios.servicio_pedidos.dominio.excepciones import ErrorRepositorio
from servicios.servicio_pedidos.dominio.pedido import Direccion, Pedido

logger = logging.getLogger(__name__)


def formatear_numero_pedido(secuencia: int) -> str:
    return f"PED-{secuencia:06d}"


class SQLAlchemyRepositorioPedido(IRepositorioPedido):
    """Repositorio de pedidos usando SQLAlchemy (SQLite local o Postgres)."""

    def __init__(self, db_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            self.db_url = db_url or Config.SQLALCHEMY_DATABASE_URI
            engine = create_engine(self.db_url, future=True)
        else:
            self.db_url = str(engine.url)
        self.engine = engine
        self.Session = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)

    @contextmanager
    def _transaccion(self, operacion: str):
        """Abre una sesión con transacción y traduce los errores de SQLAlchemy."""
        try:
            with self.Session() as s, s.begin():
                yield s
        except SQLAlchemyError as e:
            logger.error("Fallo de base de datos en %s: %s", operacion, e)
            raise ErrorRepositorio(f"No se pudo {operacion}.") from e

    # Utilidades: dominio <-> ORM
    @staticmethod
    def _to_domain(row: PedidoORM) -> Pedido:
        return Pedido(
            id=row.id,
            numero_pedido=row.numero_pedido,
            empresa_id=row.empresa_id,
            estado=row.estado,
            recogida=Direccion(
                direccion=row.direccion_recogida,
                ciudad=row.ciudad_recogida,
                barrio=row.barrio_recogida,
                codigo_postal=row.codigo_postal_recogida,
                contacto=row.contacto_recogida,
                telefono=row.telefono_recogida,
            ),
            entrega=Direccion(
                direccion=row.direccion_entrega,
                ciudad=row.ciudad_entrega,
                barrio=row.barrio_entrega,
                codigo_postal=row.codigo_postal_entrega,
                contacto=row.contacto_entrega,
                telefono=row.telefono_entrega,
            ),
            descripcion_producto=row.descripcion_producto,
            valor_producto=row.valor_producto,
            valor_frete=row.valor_frete,
            valor_total=row.valor_total,
            observaciones=row.observaciones,
            creado_en=row.creado_en,
            asignado_en=row.asignado_en,
            finalizado_en=row.finalizado_en,
            entregador_id=row.entregador_id,
        )

    @staticmethod
    def _to_orm(p: Pedido) -> PedidoORM:
        return PedidoORM(
            id=p.id,
            empresa_id=p.empresa_id,
            estado=p.estado,
            direccion_recogida=p.recogida.direccion,
            barrio_recogida=p.recogida.barrio,
            ciudad_recogida=p.recogida.ciudad,
            codigo_postal_recogida=p.recogida.codigo_postal,
            contacto_recogida=p.recogida.contacto,
            telefono_recogida=p.recogida.telefono,
            direccion_entrega=p.entrega.direccion,
            barrio_entrega=p.entrega.barrio,
            ciudad_entrega=p.entrega.ciudad,
            codigo_postal_entrega=p.entrega.codigo_postal,
            contacto_entrega=p.entrega.contacto,
            telefono_entrega=p.entrega.telefono,
            descripcion_producto=p.descripcion_producto,
            valor_producto=p.valor_producto,
            valor_frete=p.valor_frete,
            valor_total=p.valor_total,
            observaciones=p.observaciones,
            creado_en=p.creado_en,
            asignado_en=p.asignado_en,
            finalizado_en=p.finalizado_en,
            entregador_id=p.entregador_id,
        )

    @staticmethod
    def _filtro_empresa(stmt, empresa_id: str, estados: Optional[Iterable[EstadoPedido]]):
        stmt = stmt.where(PedidoORM.empresa_id == empresa_id)
        if estados is not None:
            stmt = stmt.where(PedidoORM.estado.in_(list(estados)))
        return stmt

    def insertar(self, pedido: Pedido) -> Pedido:
        with self._transaccion("guardar el pedido") as s:
            row = self._to_orm(pedido)
            s.add(row)
            s.flush()  # asigna la secuencia
            row.numero_pedido = formatear_numero_pedido(row.secuencia)
            numero = row.numero_pedido
        return replace(pedido, numero_pedido=numero)

    def obtener_por_id(self, pedido_id: str) -> Optional[Pedido]:
        with self._transaccion("consultar el pedido") as s:
            row = s.execute(select(PedidoORM).where(PedidoORM.id == pedido_id)).scalar_one_or_none()
            return self._to_domain(row) if row else None

    def actualizar_estado_condicional(self,
                                      pedido_id: str,
                                      estado_esperado: EstadoPedido,
                                      nuevo_estado: EstadoPedido,
                                      *,
                                      asignado_en: Optional[datetime] = None,
                                      entregador_id: Optional[str] = None,
                                      finalizado_en: Optional[datetime] = None) -> bool:
        valores = {"estado": nuevo_estado}
        if asignado_en is not None:
            valores["asignado_en"] = asignado_en
        if entregador_id is not None:
            valores["entregador_id"] = entregador_id
        if finalizado_en is not None:
            valores["finalizado_en"] = finalizado_en

        stmt = (
            update(PedidoORM)
            .where(PedidoORM.id == pedido_id, PedidoORM.estado == estado_esperado)
            .values(**valores)
            .execution_options(synchronize_session=False)
        )
        with self._transaccion("actualizar el estado del pedido") as s:
            resultado = s.execute(stmt)
            return resultado.rowcount == 1

    def listar_por_empresa(self,
                           empresa_id: str,
                           estados: Optional[Iterable[EstadoPedido]] = None) -> List[Pedido]:
        stmt = self._filtro_empresa(select(PedidoORM), empresa_id, estados)
        stmt = stmt.order_by(PedidoORM.creado_en.desc(), PedidoORM.secuencia.desc())
        with self._transaccion("listar los pedidos") as s:
            rows = s.execute(stmt).scalars().all()
            return [self._to_domain(r) for r in rows]

    def contar_por_empresa(self,
                           empresa_id: str,
                           estados: Optional[Iterable[EstadoPedido]] = None,
                           finalizado_desde: Optional[datetime] = None,
                           finalizado_hasta: Optional[datetime] = None) -> int:
        stmt = self._filtro_empresa(select(func.count()).select_from(PedidoORM), empresa_id, estados)
        if finalizado_desde is not None:
            stmt = stmt.where(PedidoORM.finalizado_en >= finalizado_desde)
        if finalizado_hasta is not None:
            stmt = stmt.where(PedidoORM.finalizado_en < finalizado_hasta)
        with self._transaccion("contar los pedidos") as s:
            return int(s.execute(stmt).scalar_one())
