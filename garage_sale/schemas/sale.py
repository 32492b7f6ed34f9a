# schemas/sale.py

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class PurchaseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str | None = Field(default=None, alias="customerName", max_length=255)


class SaleResponse(BaseModel):
    id: int
    image_id: int
    customer_name: str
    purchase_date: datetime
    product_name: str

    class Config:
        from_attributes = True
