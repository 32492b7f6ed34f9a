"""add_listing_flags_and_sale_cascade

Revision ID: 8a4e5d6c2b31
Revises: 3f1c2a9b7d10
Create Date: 2026-10-19 09:40:03.227519
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8a4e5d6c2b31'
down_revision: Union[str, Sequence[str], None] = '3f1c2a9b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


FLAG_COLUMNS = ("sold", "coming_soon")


def upgrade() -> None:
    """Upgrade schema. Only adds what is missing; never drops data."""

    inspector = sa.inspect(op.get_bind())

    # IMAGES: flag columns
    columns = {column["name"] for column in inspector.get_columns("images")}

    for name in FLAG_COLUMNS:
        if name not in columns:
            op.add_column(
                "images",
                sa.Column(name, sa.Boolean(), server_default=sa.false(), nullable=False),
            )

    # SALES: image_id must cascade when the listing is deleted
    foreign_keys = [
        fk for fk in inspector.get_foreign_keys("sales")
        if fk["referred_table"] == "images"
    ]

    if foreign_keys and all(
        (fk.get("options") or {}).get("ondelete", "").upper() == "CASCADE"
        for fk in foreign_keys
    ):
        return

    with op.batch_alter_table("sales") as batch_op:
        for fk in foreign_keys:
            if fk.get("name"):
                batch_op.drop_constraint(fk["name"], type_="foreignkey")

        batch_op.create_foreign_key(
            "fk_sales_image_id",
            "images",
            ["image_id"],
            ["id"],
            ondelete="CASCADE",
        )


def downgrade() -> None:
    """Downgrade schema."""

    with op.batch_alter_table("images") as batch_op:
        for name in reversed(FLAG_COLUMNS):
            batch_op.drop_column(name)
