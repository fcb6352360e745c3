"""Create customers, units and metrics tables

Revision ID: a1c4e7f20b31
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f20b31'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


unit_size = sa.Enum('SIZE_5', 'SIZE_10', 'SIZE_15', 'SIZE_20', 'SIZE_30', name='unitsize')
customer_type = sa.Enum('PRIVATE', 'BUSINESS', name='customertype')


def upgrade() -> None:
    op.create_table(
        'customers',
        sa.Column('id', sa.String(10), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('type', customer_type, nullable=False),
        sa.Column('company_name', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_type', 'customers', ['type'])
    op.create_index('ix_customers_start_date', 'customers', ['start_date'])
    op.create_index('ix_customers_end_date', 'customers', ['end_date'])

    op.create_table(
        'units',
        sa.Column('id', sa.String(10), nullable=False),
        sa.Column('size', unit_size, nullable=False),
        sa.Column('price_per_month', sa.Float(), nullable=False),
        sa.Column('is_occupied', sa.Boolean(), nullable=False),
        sa.Column('customer_id', sa.String(10), nullable=True),
        sa.Column('rented_since', sa.Date(), nullable=True),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
    )
    op.create_index('ix_units_size', 'units', ['size'])
    op.create_index('ix_units_is_occupied', 'units', ['is_occupied'])
    op.create_index('ix_units_customer_id', 'units', ['customer_id'])

    op.create_table(
        'metrics',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('month', sa.String(7), nullable=False),
        sa.Column('total_revenue', sa.Float(), nullable=False),
        sa.Column('occupancy_rate', sa.Float(), nullable=False),
        sa.Column('total_units', sa.Integer(), nullable=False),
        sa.Column('occupied_units', sa.Integer(), nullable=False),
        sa.Column('new_customers', sa.Integer(), nullable=False),
        sa.Column('churned_customers', sa.Integer(), nullable=False),
        sa.Column('average_rental_duration', sa.Float(), nullable=True),
        sa.Column('revenue_by_size', sa.Text(), nullable=True),
        sa.Column('occupancy_by_size', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_metrics_month', 'metrics', ['month'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_metrics_month', table_name='metrics')
    op.drop_table('metrics')

    op.drop_index('ix_units_customer_id', table_name='units')
    op.drop_index('ix_units_is_occupied', table_name='units')
    op.drop_index('ix_units_size', table_name='units')
    op.drop_table('units')

    op.drop_index('ix_customers_end_date', table_name='customers')
    op.drop_index('ix_customers_start_date', table_name='customers')
    op.drop_index('ix_customers_type', table_name='customers')
    op.drop_table('customers')

    unit_size.drop(op.get_bind(), checkfirst=True)
    customer_type.drop(op.get_bind(), checkfirst=True)
