"""Initial costing schema

Revision ID: 3b7d2c91e4a0
Revises:
Create Date: 2026-10-19 10:12:41.318204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7d2c91e4a0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'ingredient',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=True),
        sa.Column('package_qty', sa.Float(), nullable=True),
        sa.Column('package_unit', sa.String(length=20), nullable=True),
        sa.Column('package_cost', sa.Float(), nullable=True),
        sa.Column('unit_cost', sa.Float(), nullable=True),
        sa.Column('supplier', sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ingredient_name', 'ingredient', ['name'])

    op.create_table(
        'supply',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('package_qty', sa.Float(), nullable=True),
        sa.Column('package_unit', sa.String(length=20), nullable=True),
        sa.Column('package_cost', sa.Float(), nullable=True),
        sa.Column('unit_cost', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_supply_name', 'supply', ['name'])

    op.create_table(
        'equipment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('power_watts', sa.Float(), nullable=True),
        sa.Column('energy_cost', sa.Float(), nullable=True),
        sa.Column('formula', sa.String(length=200), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_equipment_name', 'equipment', ['name'])

    op.create_table(
        'recipe',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('base_yield', sa.Float(), nullable=True),
        sa.Column('oven_minutes', sa.Float(), nullable=True),
        sa.Column('oven_temperature', sa.Float(), nullable=True),
        sa.Column('steps', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_recipe_name', 'recipe', ['name'])

    for table, item_table, item_key, amount in (
        ('recipe_ingredient', 'ingredient', 'ingredient_id', 'quantity'),
        ('recipe_supply', 'supply', 'supply_id', 'quantity'),
        ('recipe_equipment', 'equipment', 'equipment_id', 'hours'),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('recipe_id', sa.Integer(), nullable=False),
            sa.Column(item_key, sa.Integer(), nullable=False),
            sa.Column(amount, sa.Float(), nullable=True),
            sa.ForeignKeyConstraint(['recipe_id'], ['recipe.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint([item_key], [f'{item_table}.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(f'ix_{table}_recipe_id', table, ['recipe_id'])
        op.create_index(f'ix_{table}_{item_key}', table, [item_key])

    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=50), nullable=False),
        sa.Column('value', sa.String(length=200), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key'),
    )


def downgrade():
    op.drop_table('settings')
    for table in ('recipe_equipment', 'recipe_supply', 'recipe_ingredient'):
        op.drop_table(table)
    for table in ('recipe', 'equipment', 'supply', 'ingredient'):
        op.drop_table(table)
