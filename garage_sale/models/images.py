# garage_sale/models/images.py

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, String, Text, Numeric, DateTime
from sqlalchemy.sql import func, expression
from sqlalchemy.orm import relationship

from garage_sale.database import Base


class Image(Base):
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)

    # Relative URL of the processed file, e.g. /uploads/1745194426166-844855877.webp
    image_url = Column(String(255), nullable=False)

    is_blocked = Column(Boolean, default=False, server_default=expression.false(), nullable=False)
    sold = Column(Boolean, default=False, server_default=expression.false(), nullable=False)
    coming_soon = Column(Boolean, default=False, server_default=expression.false(), nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    sales = relationship(
        "Sale",
        back_populates="image",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_images_created_at", "created_at"),
        CheckConstraint("price > 0", name="ck_images_price_positive"),
    )
