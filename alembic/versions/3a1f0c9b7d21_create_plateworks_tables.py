"""create plateworks tables

Revision ID: 3a1f0c9b7d21
Revises:
Create Date: 2026-10-18 09:30:12.418205

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3a1f0c9b7d21'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # 工序模板
    op.create_table('workflow_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sub_processes', sa.JSON(), nullable=False),
        sa.Column('trigger_sub_process', sa.String(length=64), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_workflow_templates_id'), 'workflow_templates', ['id'], unique=False)
    op.create_index(op.f('ix_workflow_templates_key'), 'workflow_templates', ['key'], unique=True)

    # 订单
    op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_number', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('client_name', sa.String(length=255), nullable=True),
        sa.Column('workflow_template', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('status_before_hold', sa.String(length=32), nullable=True),
        sa.Column('width', sa.Float(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('width_repeat_count', sa.Integer(), nullable=True),
        sa.Column('height_repeat_count', sa.Integer(), nullable=True),
        sa.Column('usage_recorded', sa.Boolean(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_orders_id'), 'orders', ['id'], unique=False)
    op.create_index(op.f('ix_orders_order_number'), 'orders', ['order_number'], unique=True)

    # 订单阶段与制版工序
    op.create_table('order_stages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=32), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id', 'name', name='uq_order_stages_order_name')
    )
    op.create_index(op.f('ix_order_stages_id'), 'order_stages', ['id'], unique=False)
    op.create_index(op.f('ix_order_stages_order_id'), 'order_stages', ['order_id'], unique=False)

    op.create_table('order_sub_processes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id', 'name', name='uq_order_sub_processes_order_name')
    )
    op.create_index(op.f('ix_order_sub_processes_id'), 'order_sub_processes', ['id'], unique=False)
    op.create_index(op.f('ix_order_sub_processes_order_id'), 'order_sub_processes', ['order_id'], unique=False)

    # 药水台账（单行）与消耗记录
    op.create_table('resource_ledger',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('total_barrels', sa.Integer(), nullable=False),
        sa.Column('current_liters', sa.Float(), nullable=False),
        sa.Column('cost_per_barrel', sa.Float(), nullable=False),
        sa.Column('recycling_cost_per_barrel', sa.Float(), nullable=False),
        sa.Column('cost_per_square_meter', sa.Float(), nullable=False),
        sa.Column('liters_per_square_meter', sa.Float(), nullable=False),
        sa.Column('recycling_rate', sa.Float(), nullable=False),
        sa.Column('recycling_frequency', sa.Integer(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('usage_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=True),
        sa.Column('area_processed_m2', sa.Float(), nullable=False),
        sa.Column('liters_consumed', sa.Float(), nullable=False),
        sa.Column('cost_incurred', sa.Float(), nullable=False),
        sa.Column('source', sa.String(length=16), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id')
    )
    op.create_index(op.f('ix_usage_events_id'), 'usage_events', ['id'], unique=False)
    op.create_index(op.f('ix_usage_events_timestamp'), 'usage_events', ['timestamp'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_usage_events_timestamp'), table_name='usage_events')
    op.drop_index(op.f('ix_usage_events_id'), table_name='usage_events')
    op.drop_table('usage_events')
    op.drop_table('resource_ledger')
    op.drop_index(op.f('ix_order_sub_processes_order_id'), table_name='order_sub_processes')
    op.drop_index(op.f('ix_order_sub_processes_id'), table_name='order_sub_processes')
    op.drop_table('order_sub_processes')
    op.drop_index(op.f('ix_order_stages_order_id'), table_name='order_stages')
    op.drop_index(op.f('ix_order_stages_id'), table_name='order_stages')
    op.drop_table('order_stages')
    op.drop_index(op.f('ix_orders_order_number'), table_name='orders')
    op.drop_index(op.f('ix_orders_id'), table_name='orders')
    op.drop_table('orders')
    op.drop_index(op.f('ix_workflow_templates_key'), table_name='workflow_templates')
    op.drop_index(op.f('ix_workflow_templates_id'), table_name='workflow_templates')
    op.drop_table('workflow_templates')
