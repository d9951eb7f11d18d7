import logging

from sqlalchemy.orm import Session

from pos_backend.errors import PosError
from pos_backend.models.product import Product
from pos_backend.models.stock_movement import MovementDirection, StockMovement

logger = logging.getLogger(__name__)


def record_movement(
    db: Session,
    product_id: str,
    quantity: int,
    direction: MovementDirection,
    reason: str,
    reference_id: str | None = None,
    commit: bool = True,
) -> StockMovement:
    """Append one movement for ``product_id``.

    With ``commit=False`` the movement is only flushed, so it becomes part of
    whatever transaction the caller has open on ``db`` and is rolled back
    with it. Corrections are made by recording an opposite movement.
    """
    if quantity <= 0:
        raise ValueError(f"Movement quantity must be positive, got {quantity}")
    product = db.get(Product, product_id)
    if not product:
        raise PosError.product_not_found(product_id)

    movement = StockMovement(
        product_id=product.id,
        product_name=product.name,
        direction=MovementDirection(direction),
        quantity=quantity,
        reason=reason,
        reference_id=reference_id,
    )
    db.add(movement)
    if commit:
        db.commit()
        db.refresh(movement)
    else:
        db.flush()
    logger.debug("Recorded %s movement of %d for %s (%s)", movement.direction, quantity, product.name, reason)
    return movement


def get_movement(db: Session, movement_id: str) -> StockMovement | None:
    return db.query(StockMovement).filter(StockMovement.id == movement_id).first()


def list_movements(
    db: Session, product_id: str | None = None, skip: int = 0, limit: int = 100
) -> list[StockMovement]:
    q = db.query(StockMovement)
    if product_id:
        q = q.filter(StockMovement.product_id == product_id)
    return q.order_by(StockMovement.created_at.desc()).offset(skip).limit(limit).all()


def list_by_reference(db: Session, reference_id: str) -> list[StockMovement]:
    return (
        db.query(StockMovement)
        .filter(StockMovement.reference_id == reference_id)
        .order_by(StockMovement.created_at)
        .all()
    )
