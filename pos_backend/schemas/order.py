from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from pos_backend.models.order import OrderType, PaymentMethod


class OrderItemCreate(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    subtotal: Decimal = Decimal("0")  # client's figure; replaced by the server's


class OrderCreate(BaseModel):
    # Emptiness is checked by the order service so it surfaces as empty_order
    items: list[OrderItemCreate] = []
    total: Decimal
    tax: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    final_total: Decimal
    payment_method: PaymentMethod
    order_type: OrderType = OrderType.SALE
    customer_name: str = ""


class OrderUpdate(BaseModel):
    customer_name: str | None = None
    payment_method: PaymentMethod | None = None


class OrderItemOut(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float

    model_config = {"from_attributes": True}


class OrderOut(BaseModel):
    id: str
    order_number: str
    order_type: str
    payment_method: str
    customer_name: str
    items: list[OrderItemOut]
    total: float
    tax: float
    discount: float
    final_total: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
