import logging

from sqlalchemy.orm import Session

from pos_backend.errors import PosError
from pos_backend.models.order import Order
from pos_backend.models.product import Product
from pos_backend.models.sales_return import ReturnStatus, SalesReturn
from pos_backend.models.stock_movement import MovementDirection
from pos_backend.schemas.sales_return import SalesReturnCreate
from pos_backend.services import inventory_ledger, stock_movement_service

logger = logging.getLogger(__name__)


def _put_back(db: Session, sr: SalesReturn, reason: str) -> None:
    product = inventory_ledger.release(db, sr.product_id, sr.quantity)
    if not product:
        raise PosError.product_not_found(sr.product_id)
    stock_movement_service.record_movement(
        db, sr.product_id, sr.quantity, MovementDirection.IN, reason, sr.id, commit=False
    )


def _take_back(db: Session, sr: SalesReturn, reason: str) -> None:
    inventory_ledger.reserve(db, sr.product_id, sr.quantity, include_deleted=True)
    stock_movement_service.record_movement(
        db, sr.product_id, sr.quantity, MovementDirection.OUT, reason, sr.id, commit=False
    )


def create_sales_return(db: Session, data: SalesReturnCreate) -> SalesReturn:
    order = db.get(Order, data.order_id)
    if not order:
        raise PosError.order_not_found(data.order_id)
    product = db.get(Product, data.product_id)
    if not product:
        raise PosError.product_not_found(data.product_id)

    sr = SalesReturn(
        order_id=order.id,
        product_id=product.id,
        product_name=product.name,
        quantity=data.quantity,
        unit_price=data.unit_price,
        total_amount=data.total_amount,
        reason=data.reason,
        customer_name=data.customer_name or order.customer_name,
        notes=data.notes,
        status=data.status,
    )
    if data.return_date:
        sr.return_date = data.return_date

    try:
        db.add(sr)
        db.flush()
        if data.status == ReturnStatus.APPROVED:
            _put_back(db, sr, f"Sales return - {sr.reason}")
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(sr)
    logger.info("Sales return %s created with status %s", sr.id, sr.status)
    return sr


def get_sales_return(db: Session, sr_id: str) -> SalesReturn | None:
    return db.query(SalesReturn).filter(SalesReturn.id == sr_id).first()


def list_sales_returns(
    db: Session, skip: int = 0, limit: int = 100, status: ReturnStatus | None = None
) -> list[SalesReturn]:
    q = db.query(SalesReturn)
    if status:
        q = q.filter(SalesReturn.status == status)
    return q.order_by(SalesReturn.created_at.desc()).offset(skip).limit(limit).all()


def update_status(db: Session, sr_id: str, status: ReturnStatus) -> SalesReturn | None:
    """Move a return between statuses; stock follows the approved state."""
    sr = get_sales_return(db, sr_id)
    if not sr:
        return None
    old_status = sr.status
    if status == old_status:
        return sr

    try:
        if status == ReturnStatus.APPROVED:
            _put_back(db, sr, f"Sales return approved - {sr.reason}")
        elif old_status == ReturnStatus.APPROVED:
            _take_back(db, sr, f"Sales return unapproved - {sr.reason}")
        sr.status = status
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(sr)
    logger.info("Sales return %s moved from %s to %s", sr_id, old_status, status)
    return sr


def delete_sales_return(db: Session, sr_id: str) -> bool:
    sr = get_sales_return(db, sr_id)
    if not sr:
        return False
    try:
        if sr.status == ReturnStatus.APPROVED:
            _take_back(db, sr, f"Sales return deleted - {sr.reason}")
        db.delete(sr)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Sales return %s deleted", sr_id)
    return True
