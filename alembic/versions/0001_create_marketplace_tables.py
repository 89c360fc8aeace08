"""create users, products, carts and cart_lines tables

Revision ID: 0001_create_marketplace
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_create_marketplace'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=55), nullable=False),
        sa.Column('last_name', sa.String(length=55), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('location', sa.String(length=55), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('buyer', 'seller')", name='ck_users_role'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=55), nullable=False),
        sa.Column('company', sa.String(length=55), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('free_shipping', sa.Boolean(), nullable=False),
        sa.Column('seller_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('color', sa.JSON(), nullable=False),
        sa.Column('in_stock', sa.Boolean(), nullable=False),
        sa.Column('image', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('price >= 0', name='ck_products_price_nonneg'),
        sa.CheckConstraint('quantity >= 0', name='ck_products_quantity_nonneg'),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_created_at', 'products', ['created_at'])
    op.create_index('ix_products_category_name', 'products', ['category', 'name'])
    op.create_index('ix_products_seller', 'products', ['seller_id'])

    op.create_table(
        'carts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
    )
    op.create_index('ix_carts_id', 'carts', ['id'])

    op.create_table(
        'cart_lines',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('cart_id', sa.Integer(), sa.ForeignKey('carts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.UniqueConstraint('cart_id', 'product_id', name='uq_cart_line_product'),
        sa.CheckConstraint('quantity > 0', name='ck_cart_line_quantity_pos'),
    )
    op.create_index('ix_cart_lines_id', 'cart_lines', ['id'])
    op.create_index('ix_cart_lines_cart', 'cart_lines', ['cart_id'])


def downgrade():
    op.drop_table('cart_lines')
    op.drop_table('carts')
    op.drop_table('products')
    op.drop_table('users')
