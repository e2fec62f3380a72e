"""crear tabla pedidos

Revision ID: 3f9c2d7a1b40
Revises:
Create Date: 2026-10-18 10:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2d7a1b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ESTADOS = ('recibido', 'enviado', 'en_camino', 'entregado', 'cancelado')


def upgrade() -> None:
    op.create_table(
        'pedidos',
        sa.Column('secuencia', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('id', sa.String(length=36), nullable=False, unique=True),
        sa.Column('numero_pedido', sa.String(length=20), nullable=True, unique=True),
        sa.Column('empresa_id', sa.String(), nullable=False),
        sa.Column('estado', sa.Enum(*ESTADOS, name='estado_pedido_enum', native_enum=False), nullable=False),
        sa.Column('direccion_recogida', sa.String(), nullable=False),
        sa.Column('barrio_recogida', sa.String(), nullable=True),
        sa.Column('ciudad_recogida', sa.String(), nullable=False),
        sa.Column('codigo_postal_recogida', sa.String(), nullable=True),
        sa.Column('contacto_recogida', sa.String(), nullable=True),
        sa.Column('telefono_recogida', sa.String(), nullable=True),
        sa.Column('direccion_entrega', sa.String(), nullable=False),
        sa.Column('barrio_entrega', sa.String(), nullable=True),
        sa.Column('ciudad_entrega', sa.String(), nullable=False),
        sa.Column('codigo_postal_entrega', sa.String(), nullable=True),
        sa.Column('contacto_entrega', sa.String(), nullable=True),
        sa.Column('telefono_entrega', sa.String(), nullable=True),
        sa.Column('descripcion_producto', sa.String(), nullable=True),
        sa.Column('valor_producto', sa.Numeric(12, 2), nullable=False),
        sa.Column('valor_frete', sa.Numeric(12, 2), nullable=False),
        sa.Column('valor_total', sa.Numeric(12, 2), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('creado_en', sa.DateTime(), nullable=False),
        sa.Column('asignado_en', sa.DateTime(), nullable=True),
        sa.Column('finalizado_en', sa.DateTime(), nullable=True),
        sa.Column('entregador_id', sa.String(), nullable=True),
        sa.CheckConstraint('valor_frete > 0', name='ck_pedidos_valor_frete_positivo'),
    )
    op.create_index('ix_pedidos_empresa_id', 'pedidos', ['empresa_id'])
    op.create_index('idx_pedidos_empresa_estado', 'pedidos', ['empresa_id', 'estado'])
    op.create_index('idx_pedidos_finalizado', 'pedidos', ['finalizado_en'])


def downgrade() -> None:
    op.drop_index('idx_pedidos_finalizado', table_name='pedidos')
    op.drop_index('idx_pedidos_empresa_estado', table_name='pedidos')
    op.drop_index('ix_pedidos_empresa_id', table_name='pedidos')
    op.drop_table('pedidos')
