import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from pos_backend.models.product import Product
from pos_backend.models.stock_movement import MovementDirection, StockMovement
from pos_backend.schemas.product import ProductCreate, ProductUpdate, StockAdjust
from pos_backend.services import inventory_ledger, soft_delete, stock_movement_service

logger = logging.getLogger(__name__)


def create_product(db: Session, data: ProductCreate) -> Product:
    logger.info("Creating new product: %s", data.name)
    product = Product(
        name=data.name,
        description=data.description,
        barcode=data.barcode,
        image=data.image,
        category_id=data.category_id,
        supplier_id=data.supplier_id,
        selling_price=data.selling_price,
        cost_price=data.cost_price,
        stock=0,
        min_stock=data.min_stock,
    )
    db.add(product)
    db.flush()

    # Opening stock goes through the ledger like every other stock change
    if data.stock > 0:
        inventory_ledger.release(db, product.id, data.stock)
        stock_movement_service.record_movement(
            db, product.id, data.stock, MovementDirection.IN, "Initial stock on product creation", commit=False
        )

    db.commit()
    db.refresh(product)
    logger.info("Product created with ID: %s", product.id)
    return product


def get_product(db: Session, product_id: str) -> Product | None:
    return soft_delete.get_active(db, Product, product_id)


def list_products(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    category_id: str | None = None,
    supplier_id: str | None = None,
    search: str | None = None,
) -> list[Product]:
    q = soft_delete.active(db, Product)
    if category_id:
        q = q.filter(Product.category_id == category_id)
    if supplier_id:
        q = q.filter(Product.supplier_id == supplier_id)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        q = q.filter(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.barcode == search.strip(),
            )
        )
    return q.order_by(Product.name).offset(skip).limit(limit).all()


def get_low_stock(db: Session) -> list[Product]:
    return soft_delete.active(db, Product).filter(Product.stock <= Product.min_stock).all()


def update_product(db: Session, product_id: str, data: ProductUpdate) -> Product | None:
    product = get_product(db, product_id)
    if not product:
        return None
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(product, field, value)
    db.commit()
    db.refresh(product)
    logger.info("Product %s updated successfully", product_id)
    return product


def adjust_stock(db: Session, product_id: str, data: StockAdjust) -> Product | None:
    """Manual correction: a signed delta applied through the ledger."""
    if not get_product(db, product_id):
        return None
    try:
        product = inventory_ledger.adjust(db, product_id, data.quantity)
        stock_movement_service.record_movement(
            db,
            product_id,
            abs(data.quantity),
            MovementDirection.ADJUSTMENT,
            f"{data.reason} ({data.quantity:+d})",
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(product)
    return product


def get_movements(db: Session, product_id: str) -> list[StockMovement]:
    return stock_movement_service.list_movements(db, product_id=product_id)


def delete_product(db: Session, product_id: str) -> Product | None:
    return soft_delete.soft_delete(db, Product, product_id)


def restore_product(db: Session, product_id: str) -> Product | None:
    return soft_delete.restore(db, Product, product_id)


def purge_product(db: Session, product_id: str) -> bool:
    return soft_delete.purge(db, Product, product_id)
