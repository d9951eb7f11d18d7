from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from pos_backend.models.sales_return import ReturnStatus


class SalesReturnCreate(BaseModel):
    order_id: str
    product_id: str
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    total_amount: Decimal = Field(ge=0)
    reason: str
    return_date: datetime | None = None
    customer_name: str = ""
    notes: str = ""
    status: ReturnStatus = ReturnStatus.PENDING


class SalesReturnStatusUpdate(BaseModel):
    status: ReturnStatus


class SalesReturnOut(BaseModel):
    id: str
    order_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_amount: float
    reason: str
    return_date: datetime
    customer_name: str
    notes: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
