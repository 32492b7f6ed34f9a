from decimal import Decimal, ROUND_HALF_UP
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

MAX_TITLE_LENGTH = 255
MAX_PRICE = Decimal("100000000")


def round_price(price: Decimal) -> Decimal:
    """Round to cents. Callers bound the magnitude first so quantize cannot overflow."""
    return price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ImageUpdate(BaseModel):
    title: str
    description: str | None = None

    price: Decimal = Field(
        ...,
        gt=0,
        lt=MAX_PRICE,
        description="Price must be positive and below 100 million"
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required and must be a non-empty string")
        if len(value) > MAX_TITLE_LENGTH:
            raise ValueError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
        return value

    @field_validator("price")
    @classmethod
    def price_to_cents(cls, value: Decimal) -> Decimal:
        value = round_price(value)
        if value <= 0:
            raise ValueError("Price must be a number greater than 0")
        if value >= MAX_PRICE:
            raise ValueError("Price must be below 100 million")
        return value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class ImageResponse(BaseModel):
    id: int
    title: str
    description: str | None
    price: float
    image_url: str
    is_blocked: bool
    sold: bool
    coming_soon: bool
    created_at: datetime | None

    class Config:
        from_attributes = True
