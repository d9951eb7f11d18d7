import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_backend.database import supports_transactions
from pos_backend.errors import PosError
from pos_backend.models.order import Order, OrderItem, OrderType
from pos_backend.models.stock_movement import MovementDirection
from pos_backend.schemas.order import OrderCreate, OrderUpdate
from pos_backend.services import inventory_ledger, pricing_service, soft_delete, stock_movement_service
from pos_backend.services.pricing_service import PricedOrder

logger = logging.getLogger(__name__)


def _generate_order_number() -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    short = uuid.uuid4().hex[:6].upper()
    return f"ORD-{ts}-{short}"


def _build_order(data: OrderCreate, priced: PricedOrder) -> Order:
    order = Order(
        order_number=_generate_order_number(),
        order_type=data.order_type,
        payment_method=data.payment_method,
        customer_name=data.customer_name,
        total=priced.total,
        tax=priced.tax,
        discount=priced.discount,
        final_total=priced.final_total,
    )
    for position, item in enumerate(priced.items):
        order.items.append(
            OrderItem(
                position=position,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
            )
        )
    return order


def _movement_reason(order: Order) -> str:
    label = "Purchase" if order.order_type == OrderType.PURCHASE else "Sale"
    return f"{label} - Order #{order.order_number}"


def create_order(db: Session, data: OrderCreate) -> Order:
    """Price, reserve stock for, and persist one order.

    Uses a single database transaction when the connection supports it and
    a compensating sequence otherwise. Line items are reserved in the order
    the caller sent them.
    """
    logger.info("Creating new order with %d items", len(data.items))
    if not data.items:
        raise PosError.empty_order()

    priced = pricing_service.price_order(db, data)

    if supports_transactions(db.get_bind()):
        order = _create_with_transaction(db, data, priced)
    else:
        logger.warning("Database transactions not available. Using atomic operations with compensation.")
        order = _create_with_compensation(db, data, priced)

    db.refresh(order)
    return order


def _create_with_transaction(db: Session, data: OrderCreate, priced: PricedOrder) -> Order:
    try:
        for item in priced.items:
            inventory_ledger.reserve(db, item.product_id, item.quantity)

        order = _build_order(data, priced)
        db.add(order)
        db.flush()
        logger.debug("Order created with ID: %s", order.id)

        reason = _movement_reason(order)
        for item in priced.items:
            stock_movement_service.record_movement(
                db, item.product_id, item.quantity, MovementDirection.OUT, reason, order.id, commit=False
            )

        db.commit()
    except PosError as e:
        db.rollback()
        logger.error("Transaction failed and rolled back: %s", e.message)
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Transaction failed and rolled back: %s", e, exc_info=True)
        raise PosError.transaction_aborted(str(e.__class__.__name__)) from e
    except Exception:
        db.rollback()
        logger.exception("Transaction failed and rolled back")
        raise

    logger.info("Order %s created successfully with transaction", order.id)
    return order


def _create_with_compensation(db: Session, data: OrderCreate, priced: PricedOrder) -> Order:
    reservations = inventory_ledger.Reservations()

    try:
        for item in priced.items:
            inventory_ledger.reserve(db, item.product_id, item.quantity)
            db.commit()
            reservations.add(item.product_id, item.quantity)
    except Exception as e:
        db.rollback()
        logger.error("Order creation failed after %d reservations, rolling back stock: %s", len(reservations), e)
        reservations.release_all(db)
        if isinstance(e, SQLAlchemyError):
            raise PosError.transaction_aborted(e.__class__.__name__) from e
        raise

    try:
        order = _build_order(data, priced)
        db.add(order)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Order could not be saved, rolling back stock: %s", e)
        reservations.release_all(db)
        if isinstance(e, SQLAlchemyError):
            raise PosError.transaction_aborted(e.__class__.__name__) from e
        raise
    logger.debug("Order created with ID: %s", order.id)

    # Past this point the order and its stock decrements stand. A movement
    # that fails to record leaves a known gap in the audit trail.
    reason = _movement_reason(order)
    for item in priced.items:
        try:
            stock_movement_service.record_movement(
                db, item.product_id, item.quantity, MovementDirection.OUT, reason, order.id
            )
        except (PosError, SQLAlchemyError) as e:
            db.rollback()
            logger.error(
                "AUDIT GAP: stock movement not recorded for order %s, product %s, quantity %d: %s",
                order.id,
                item.product_id,
                item.quantity,
                e,
            )

    logger.info("Order %s created successfully with atomic operations", order.id)
    return order


def get_order(db: Session, order_id: str) -> Order | None:
    return soft_delete.get_active(db, Order, order_id)


def list_orders(
    db: Session, skip: int = 0, limit: int = 100, order_type: OrderType | None = None
) -> list[Order]:
    q = soft_delete.active(db, Order)
    if order_type:
        q = q.filter(Order.order_type == order_type)
    return q.order_by(Order.created_at.desc()).offset(skip).limit(limit).all()


def update_order(db: Session, order_id: str, data: OrderUpdate) -> Order | None:
    """Edit administrative fields. Items and totals are fixed at creation."""
    order = get_order(db, order_id)
    if not order:
        return None
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(order, field, value)
    db.commit()
    db.refresh(order)
    logger.info("Order %s updated successfully", order_id)
    return order


def delete_order(db: Session, order_id: str) -> Order | None:
    # Stock is not returned; reversals go through sales returns
    return soft_delete.soft_delete(db, Order, order_id)


def restore_order(db: Session, order_id: str) -> Order | None:
    return soft_delete.restore(db, Order, order_id)


def purge_order(db: Session, order_id: str) -> bool:
    return soft_delete.purge(db, Order, order_id)
