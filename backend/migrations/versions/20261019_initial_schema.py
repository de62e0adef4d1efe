"""Initial schema: products, sales and debts

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("acquisition_value", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("initial_quantity", sa.Integer(), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quantity >= 0", name="ck_products_quantity_nonnegative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_created", "products", ["created_at", "id"], unique=False)

    op.create_table(
        "sales",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("product_id", sa.String(length=36), nullable=False),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("quantity_sold", sa.Integer(), nullable=False),
        sa.Column("sale_value", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("is_loss", sa.Boolean(), nullable=False),
        sa.Column("loss_reason", sa.Text(), nullable=True),
        sa.Column("profit", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quantity_sold > 0", name="ck_sales_quantity_positive"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sales_product_id", "sales", ["product_id"], unique=False)
    op.create_index("ix_sales_is_loss", "sales", ["is_loss"], unique=False)
    op.create_index("ix_sales_product_created", "sales", ["product_id", "created_at"], unique=False)
    op.create_index("ix_sales_created", "sales", ["created_at", "id"], unique=False)

    op.create_table(
        "debts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("amount_paid", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("contact_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("related_sale_id", sa.String(length=36), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_debts_amount_positive"),
        sa.CheckConstraint("amount_paid >= 0", name="ck_debts_amount_paid_nonnegative"),
        sa.ForeignKeyConstraint(["related_sale_id"], ["sales.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_debts_related_sale_id", "debts", ["related_sale_id"], unique=False)
    op.create_index("ix_debts_type_status", "debts", ["type", "status"], unique=False)
    op.create_index("ix_debts_created", "debts", ["created_at", "id"], unique=False)


def downgrade():
    op.drop_index("ix_debts_created", table_name="debts")
    op.drop_index("ix_debts_type_status", table_name="debts")
    op.drop_index("ix_debts_related_sale_id", table_name="debts")
    op.drop_table("debts")

    op.drop_index("ix_sales_created", table_name="sales")
    op.drop_index("ix_sales_product_created", table_name="sales")
    op.drop_index("ix_sales_is_loss", table_name="sales")
    op.drop_index("ix_sales_product_id", table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_products_created", table_name="products")
    op.drop_table("products")
