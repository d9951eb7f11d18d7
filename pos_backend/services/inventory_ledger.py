"""Atomic stock primitives.

``reserve`` and ``release`` are the only code paths that write
``Product.stock``. Both are single UPDATE statements, so concurrent callers
are serialized by the database row lock rather than by application code:
two orders for different products never contend, and two orders for the
same product only contend for the duration of the conditional decrement.

Neither function commits; the caller owns the session and decides whether
the change is part of a larger transaction.
"""

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_backend.errors import PosError
from pos_backend.models.product import Product

logger = logging.getLogger(__name__)


def _check_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ValueError(f"Quantity must be a positive integer, got {quantity}")


def reserve(db: Session, product_id: str, quantity: int, include_deleted: bool = False) -> Product:
    """Decrement stock by ``quantity`` if and only if enough is on hand.

    Returns the product with its post-decrement stock. A missing or
    soft-deleted product and a short product are the same failed UPDATE;
    they are told apart afterwards only to build the error.

    ``include_deleted`` is for reversals (un-approving a return, deleting a
    purchase): stock that came in for a product can still be taken back out
    after the product was soft deleted.
    """
    _check_quantity(quantity)
    conditions = [Product.id == product_id, Product.stock >= quantity]
    if not include_deleted:
        conditions.append(Product.deleted_at.is_(None))
    stmt = (
        update(Product)
        .where(*conditions)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        product = db.get(Product, product_id, populate_existing=True)
        if not product or (product.is_deleted and not include_deleted):
            raise PosError.product_not_found(product_id)
        raise PosError.insufficient_stock(product.id, product.name, product.stock, quantity)

    product = db.get(Product, product_id, populate_existing=True)
    logger.debug("Reserved %d of %s, %d left", quantity, product.name, product.stock)
    return product


def release(db: Session, product_id: str, quantity: int) -> Product | None:
    """Increment stock by ``quantity`` unconditionally.

    Used to compensate a reservation and to book goods coming back in
    (purchase receipt, approved return). Soft-deleted products are still
    released so compensation never leaves stock stranded.
    """
    _check_quantity(quantity)
    stmt = (
        update(Product)
        .where(Product.id == product_id)
        .values(stock=Product.stock + quantity)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        return None
    product = db.get(Product, product_id, populate_existing=True)
    logger.debug("Released %d of %s, now %d", quantity, product.name, product.stock)
    return product


def adjust(db: Session, product_id: str, delta: int) -> Product:
    """Apply a signed manual correction through the two primitives above."""
    if delta == 0:
        raise ValueError("Adjustment quantity cannot be zero")
    if delta < 0:
        return reserve(db, product_id, -delta)
    product = release(db, product_id, delta)
    if not product or product.is_deleted:
        raise PosError.product_not_found(product_id)
    return product


class Reservations:
    """Reservations applied so far in one non-transactional order attempt.

    Each entry has already been committed on its own. On failure the whole
    list is folded through ``release``; release is an increment, so the
    undo order does not matter, but it runs newest first to mirror apply.
    """

    def __init__(self):
        self.applied: list[tuple[str, int]] = []

    def add(self, product_id: str, quantity: int) -> None:
        self.applied.append((product_id, quantity))

    def __len__(self) -> int:
        return len(self.applied)

    def release_all(self, db: Session) -> list[PosError]:
        """Best-effort undo. Failures are logged and returned, never raised."""
        failures: list[PosError] = []
        for product_id, quantity in reversed(self.applied):
            try:
                product = release(db, product_id, quantity)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                failure = PosError.compensation_failed(product_id, quantity, str(e))
                logger.error("%s [%s]", failure.message, failure.kind.value)
                failures.append(failure)
                continue
            if product is None:
                failure = PosError.compensation_failed(product_id, quantity, "product no longer exists")
                logger.error("%s [%s]", failure.message, failure.kind.value)
                failures.append(failure)
            else:
                logger.debug("Stock rolled back for product %s (+%d)", product_id, quantity)
        self.applied.clear()
        return failures
