"""create_listing_tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 09:12:41.518204
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # Deployments that predate migrations already have some of these tables
    existing = set(sa.inspect(op.get_bind()).get_table_names())

    # USERS
    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("username", sa.String(255), nullable=False),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("role", sa.String(20), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.CheckConstraint("role IN ('admin', 'super_admin')", name="ck_users_role_valid"),
        )
        op.create_index("ix_users_id", "users", ["id"], unique=False)
        op.create_index("ix_users_username", "users", ["username"], unique=True)

    # IMAGES (flag columns are added by the next revision)
    if "images" not in existing:
        op.create_table(
            "images",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("price", sa.Numeric(10, 2), nullable=False),
            sa.Column("image_url", sa.String(255), nullable=False),
            sa.Column("is_blocked", sa.Boolean(), server_default=sa.false(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.CheckConstraint("price > 0", name="ck_images_price_positive"),
        )
        op.create_index("ix_images_id", "images", ["id"], unique=False)
        op.create_index("ix_images_created_at", "images", ["created_at"], unique=False)

    # SALES
    if "sales" not in existing:
        op.create_table(
            "sales",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "image_id",
                sa.Integer(),
                sa.ForeignKey("images.id", name="fk_sales_image_id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("customer_name", sa.String(255), nullable=False),
            sa.Column("purchase_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index("ix_sales_id", "sales", ["id"], unique=False)
        op.create_index("ix_sales_image_id", "sales", ["image_id"], unique=False)
        op.create_index("ix_sales_purchase_date", "sales", ["purchase_date"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("sales")
    op.drop_table("images")
    op.drop_table("users")
