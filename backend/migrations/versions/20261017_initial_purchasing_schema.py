"""Initial purchasing schema: items, users, purchase order headers and details

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_initial"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns():
    return [
        sa.Column("created_by", sa.String(length=100), nullable=False),
        sa.Column("updated_by", sa.String(length=100), nullable=False),
        sa.Column("created_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_datetime", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("price", sa.BigInteger(), nullable=False),
        sa.Column("cost", sa.BigInteger(), nullable=False),
        *_audit_columns(),
        sa.CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
        sa.CheckConstraint("cost >= 0", name="ck_items_cost_non_negative"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_items_name", "items", ["name"])
    op.create_index("ix_items_created_datetime", "items", ["created_datetime"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=500), nullable=False),
        sa.Column("last_name", sa.String(length=500), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_users_created_datetime", "users", ["created_datetime"])

    op.create_table(
        "purchase_order_headers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("order_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("total_price", sa.BigInteger(), nullable=False),
        sa.Column("total_cost", sa.BigInteger(), nullable=False),
        *_audit_columns(),
        sa.CheckConstraint("total_price >= 0", name="ck_po_headers_total_price_non_negative"),
        sa.CheckConstraint("total_cost >= 0", name="ck_po_headers_total_cost_non_negative"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_po_headers_order_datetime", "purchase_order_headers", ["order_datetime"])
    op.create_index("ix_purchase_order_headers_created_datetime", "purchase_order_headers", ["created_datetime"])

    op.create_table(
        "purchase_order_details",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("purchase_order_id", sa.Integer(), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_cost", sa.BigInteger(), nullable=False),
        sa.Column("unit_price", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_po_details_quantity_positive"),
        sa.CheckConstraint("unit_price >= 0", name="ck_po_details_unit_price_non_negative"),
        sa.CheckConstraint("unit_cost >= 0", name="ck_po_details_unit_cost_non_negative"),
        sa.ForeignKeyConstraint(["purchase_order_id"], ["purchase_order_headers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_purchase_order_details_purchase_order_id", "purchase_order_details", ["purchase_order_id"])
    op.create_index("ix_purchase_order_details_item_id", "purchase_order_details", ["item_id"])


def downgrade():
    op.drop_index("ix_purchase_order_details_item_id", table_name="purchase_order_details")
    op.drop_index("ix_purchase_order_details_purchase_order_id", table_name="purchase_order_details")
    op.drop_table("purchase_order_details")
    op.drop_index("ix_purchase_order_headers_created_datetime", table_name="purchase_order_headers")
    op.drop_index("ix_po_headers_order_datetime", table_name="purchase_order_headers")
    op.drop_table("purchase_order_headers")
    op.drop_index("ix_users_created_datetime", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_items_created_datetime", table_name="items")
    op.drop_index("ix_items_name", table_name="items")
    op.drop_table("items")
