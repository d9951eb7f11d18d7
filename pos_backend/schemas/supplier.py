from datetime import datetime

from pydantic import BaseModel


class SupplierCreate(BaseModel):
    name: str
    phone: str
    email: str = ""
    address: str = ""


class SupplierUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class SupplierOut(BaseModel):
    id: str
    name: str
    phone: str
    email: str
    address: str
    created_at: datetime

    model_config = {"from_attributes": True}
