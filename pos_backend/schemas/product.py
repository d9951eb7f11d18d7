from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str
    selling_price: Decimal = Field(ge=0)
    cost_price: Decimal = Field(ge=0)
    category_id: str = ""
    supplier_id: str = ""
    description: str = ""
    barcode: str = ""
    image: str = ""
    stock: int = Field(default=0, ge=0)  # opening stock, booked as an "in" movement
    min_stock: int = Field(default=0, ge=0)


class ProductUpdate(BaseModel):
    # stock is deliberately absent: it only moves through the inventory ledger
    name: str | None = None
    selling_price: Decimal | None = Field(default=None, ge=0)
    cost_price: Decimal | None = Field(default=None, ge=0)
    category_id: str | None = None
    supplier_id: str | None = None
    description: str | None = None
    barcode: str | None = None
    image: str | None = None
    min_stock: int | None = Field(default=None, ge=0)


class ProductOut(BaseModel):
    id: str
    name: str
    description: str
    barcode: str
    image: str
    category_id: str
    supplier_id: str
    selling_price: float
    cost_price: float
    stock: int
    min_stock: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StockAdjust(BaseModel):
    quantity: int  # positive to add, negative to remove
    reason: str = "Manual adjustment"
