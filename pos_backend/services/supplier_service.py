from sqlalchemy.orm import Session

from pos_backend.models.supplier import Supplier
from pos_backend.schemas.supplier import SupplierCreate, SupplierUpdate


def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
    supplier = Supplier(name=data.name, phone=data.phone, email=data.email, address=data.address)
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


def get_supplier(db: Session, supplier_id: str) -> Supplier | None:
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()


def list_suppliers(db: Session, skip: int = 0, limit: int = 100) -> list[Supplier]:
    return db.query(Supplier).order_by(Supplier.name).offset(skip).limit(limit).all()


def update_supplier(db: Session, supplier_id: str, data: SupplierUpdate) -> Supplier | None:
    supplier = get_supplier(db, supplier_id)
    if not supplier:
        return None
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(supplier, field, value)
    db.commit()
    db.refresh(supplier)
    return supplier


def delete_supplier(db: Session, supplier_id: str) -> bool:
    supplier = get_supplier(db, supplier_id)
    if not supplier:
        return False
    db.delete(supplier)
    db.commit()
    return True
