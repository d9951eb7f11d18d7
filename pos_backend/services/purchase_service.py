import logging

from sqlalchemy.orm import Session

from pos_backend.errors import PosError
from pos_backend.models.product import Product
from pos_backend.models.purchase import Purchase
from pos_backend.models.stock_movement import MovementDirection
from pos_backend.schemas.purchase import PurchaseCreate, PurchaseUpdate
from pos_backend.services import inventory_ledger, soft_delete, stock_movement_service

logger = logging.getLogger(__name__)


def create_purchase(db: Session, data: PurchaseCreate) -> Purchase:
    """Book received goods: purchase row, stock increase and "in" movement together."""
    product = soft_delete.get_active(db, Product, data.product_id)
    if not product:
        raise PosError.product_not_found(data.product_id)

    purchase = Purchase(
        product_id=product.id,
        product_name=product.name,
        quantity=data.quantity,
        cost_price=data.cost_price,
        total_cost=data.total_cost,
        supplier_id=data.supplier_id,
        supplier=data.supplier,
        invoice_number=data.invoice_number,
        notes=data.notes,
    )
    if data.purchase_date:
        purchase.purchase_date = data.purchase_date

    try:
        db.add(purchase)
        db.flush()
        inventory_ledger.release(db, product.id, data.quantity)
        stock_movement_service.record_movement(
            db,
            product.id,
            data.quantity,
            MovementDirection.IN,
            f"Purchase from {data.supplier}",
            purchase.id,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(purchase)
    logger.info("Purchase %s received: %d x %s", purchase.id, purchase.quantity, purchase.product_name)
    return purchase


def get_purchase(db: Session, purchase_id: str) -> Purchase | None:
    return db.query(Purchase).filter(Purchase.id == purchase_id).first()


def list_purchases(db: Session, skip: int = 0, limit: int = 100, product_id: str | None = None) -> list[Purchase]:
    q = db.query(Purchase)
    if product_id:
        q = q.filter(Purchase.product_id == product_id)
    return q.order_by(Purchase.purchase_date.desc()).offset(skip).limit(limit).all()


def update_purchase(db: Session, purchase_id: str, data: PurchaseUpdate) -> Purchase | None:
    """A quantity change is booked as a delta against stock.

    Lowering the quantity takes stock back out through the conditional
    reserve, so it fails with insufficient_stock rather than going negative.
    """
    purchase = get_purchase(db, purchase_id)
    if not purchase:
        return None

    update_data = data.model_dump(exclude_unset=True)
    try:
        new_quantity = update_data.get("quantity")
        if new_quantity is not None and new_quantity != purchase.quantity:
            difference = new_quantity - purchase.quantity
            if difference > 0:
                inventory_ledger.release(db, purchase.product_id, difference)
                direction = MovementDirection.IN
            else:
                inventory_ledger.reserve(db, purchase.product_id, -difference, include_deleted=True)
                direction = MovementDirection.OUT
            stock_movement_service.record_movement(
                db,
                purchase.product_id,
                abs(difference),
                direction,
                f"Purchase adjustment - {purchase.supplier}",
                purchase.id,
                commit=False,
            )

        for field, value in update_data.items():
            if value is not None:
                setattr(purchase, field, value)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(purchase)
    return purchase


def delete_purchase(db: Session, purchase_id: str) -> bool:
    """Remove a purchase and take its goods back out of stock."""
    purchase = get_purchase(db, purchase_id)
    if not purchase:
        return False
    try:
        inventory_ledger.reserve(db, purchase.product_id, purchase.quantity, include_deleted=True)
        stock_movement_service.record_movement(
            db,
            purchase.product_id,
            purchase.quantity,
            MovementDirection.OUT,
            f"Purchase deleted - {purchase.supplier}",
            purchase.id,
            commit=False,
        )
        db.delete(purchase)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Purchase %s deleted and stock reversed", purchase_id)
    return True
