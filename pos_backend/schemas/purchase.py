from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class PurchaseCreate(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    cost_price: Decimal = Field(ge=0)
    total_cost: Decimal = Field(ge=0)
    supplier: str
    supplier_id: str = ""
    invoice_number: str = ""
    purchase_date: datetime | None = None
    notes: str = ""


class PurchaseUpdate(BaseModel):
    quantity: int | None = Field(default=None, ge=1)
    cost_price: Decimal | None = Field(default=None, ge=0)
    total_cost: Decimal | None = Field(default=None, ge=0)
    invoice_number: str | None = None
    notes: str | None = None


class PurchaseOut(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    cost_price: float
    total_cost: float
    supplier_id: str
    supplier: str
    invoice_number: str
    purchase_date: datetime
    notes: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
