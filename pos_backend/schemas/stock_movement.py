from datetime import datetime

from pydantic import BaseModel


class StockMovementOut(BaseModel):
    id: str
    product_id: str
    product_name: str
    direction: str
    quantity: int
    reason: str
    reference_id: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
