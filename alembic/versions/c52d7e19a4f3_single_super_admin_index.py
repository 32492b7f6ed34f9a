"""single_super_admin_index

Revision ID: c52d7e19a4f3
Revises: 8a4e5d6c2b31
Create Date: 2026-10-20 10:05:37.904112
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c52d7e19a4f3'
down_revision: Union[str, Sequence[str], None] = '8a4e5d6c2b31'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


INDEX_NAME = "uq_users_single_super_admin"
PARTIAL_INDEX_DIALECTS = ("postgresql", "sqlite")


def upgrade() -> None:
    """Upgrade schema. Partial unique index; skipped where it is unsupported or present."""

    bind = op.get_bind()
    if bind.dialect.name not in PARTIAL_INDEX_DIALECTS:
        return

    existing = {index["name"] for index in sa.inspect(bind).get_indexes("users")}
    if INDEX_NAME in existing:
        return

    op.create_index(
        INDEX_NAME,
        "users",
        ["role"],
        unique=True,
        postgresql_where=sa.text("role = 'super_admin'"),
        sqlite_where=sa.text("role = 'super_admin'"),
    )


def downgrade() -> None:
    """Downgrade schema."""

    if op.get_bind().dialect.name in PARTIAL_INDEX_DIALECTS:
        op.drop_index(INDEX_NAME, table_name="users")
