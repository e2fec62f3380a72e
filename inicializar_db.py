# inicializar_db.py

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    Numeric,
    Text,
    Enum as SAEnum,
    DateTime,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.exc import SQLAlchemyError

from configuracion import Config
from servicios.servicio_pedidos.dominio.estado import EstadoPedido

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
# Base ORM
# ----------------------------------------------------------------------
Base = declarative_base()


# ----------------------------------------------------------------------
# Modelos ORM
# ----------------------------------------------------------------------
class PedidoORM(Base):
    """
    Tabla de pedidos de entrega.
    - secuencia: autoincremental, solo se usa para generar numero_pedido
    - id: UUID en string (lo genera el dominio)
    - montos en Numeric(12, 2) para no perder centavos
    """
    __tablename__ = "pedidos"

    secuencia = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    numero_pedido = Column(String(20), unique=True, nullable=True)
    empresa_id = Column(String, nullable=False, index=True)

    estado = Column(SAEnum(
        EstadoPedido,
        name="estado_pedido_enum",
        native_enum=False,           # Para SQLite crea CHECK en lugar de tipo nativo
        validate_strings=True,
        values_callable=lambda enum_cls: [e.value for e in enum_cls],
    ), nullable=False, default=EstadoPedido.RECIBIDO)

    # Recogida
    direccion_recogida = Column(String, nullable=False)
    barrio_recogida = Column(String, nullable=True)
    ciudad_recogida = Column(String, nullable=False)
    codigo_postal_recogida = Column(String, nullable=True)
    contacto_recogida = Column(String, nullable=True)
    telefono_recogida = Column(String, nullable=True)

    # Entrega
    direccion_entrega = Column(String, nullable=False)
    barrio_entrega = Column(String, nullable=True)
    ciudad_entrega = Column(String, nullable=False)
    codigo_postal_entrega = Column(String, nullable=True)
    contacto_entrega = Column(String, nullable=True)
    telefono_entrega = Column(String, nullable=True)

    # Producto y valores
    descripcion_producto = Column(String, nullable=True)
    valor_producto = Column(Numeric(12, 2, asdecimal=True), nullable=False, default=0)
    valor_frete = Column(Numeric(12, 2, asdecimal=True), nullable=False)
    valor_total = Column(Numeric(12, 2, asdecimal=True), nullable=False)
    observaciones = Column(Text, nullable=True)

    # Fechas del ciclo de vida
    creado_en = Column(DateTime, nullable=False)
    asignado_en = Column(DateTime, nullable=True)
    finalizado_en = Column(DateTime, nullable=True)
    entregador_id = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("valor_frete > 0", name="ck_pedidos_valor_frete_positivo"),
        Index("idx_pedidos_empresa_estado", "empresa_id", "estado"),
        Index("idx_pedidos_finalizado", "finalizado_en"),
    )


# ----------------------------------------------------------------------
# Helpers DB
# ----------------------------------------------------------------------
def resolve_db_uri() -> str:
    """
    Devuelve la URI de la base de datos a usar (Config.SQLALCHEMY_DATABASE_URI).
    Si es SQLite en archivo, crea la carpeta si no existe.
    """
    db_uri = Config.SQLALCHEMY_DATABASE_URI
    if db_uri.startswith("sqlite:///") and db_uri != "sqlite:///:memory:":
        sqlite_file = Path(db_uri.replace("sqlite:///", "", 1))
        sqlite_file.parent.mkdir(parents=True, exist_ok=True)
    return db_uri


def get_engine(db_uri: str):
    return create_engine(db_uri, echo=False, future=True)


# ----------------------------------------------------------------------
# Inicialización
# ----------------------------------------------------------------------
def inicializar_base_datos(db_uri: str | None = None) -> None:
    """Crea las tablas si no existen."""
    db_uri = db_uri or resolve_db_uri()
    engine = get_engine(db_uri)
    try:
        Base.metadata.create_all(engine)
        logger.info("Tablas creadas/verificadas en: %s", engine.url.render_as_string(hide_password=True))
    except SQLAlchemyError:
        logger.exception("Error durante la inicialización de la base de datos")
        raise
    finally:
        engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    inicializar_base_datos()
