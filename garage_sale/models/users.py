# garage_sale/models/users.py

from sqlalchemy import CheckConstraint, Column, Index, Integer, String, DateTime, text
from sqlalchemy.sql import func

from garage_sale.database import Base

ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"
ADMIN_ROLES = (ROLE_ADMIN, ROLE_SUPER_ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    role = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'super_admin')", name="ck_users_role_valid"),
        # At most one super admin. Partial indexes only exist on these backends;
        # elsewhere the bootstrap relies on its existence check alone.
        Index(
            "uq_users_single_super_admin",
            "role",
            unique=True,
            postgresql_where=text("role = 'super_admin'"),
            sqlite_where=text("role = 'super_admin'"),
        ).ddl_if(dialect=("postgresql", "sqlite")),
    )
