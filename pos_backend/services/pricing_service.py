"""Server-side order pricing.

Client-submitted subtotals and totals are only checked, never stored: the
persisted order carries the figures computed here from current product
prices. Runs before any stock is touched, so a mismatch has no side effects.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from pos_backend.config import settings
from pos_backend.errors import PosError
from pos_backend.models.product import Product
from pos_backend.schemas.order import OrderCreate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _to_cents(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricedItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class PricedOrder:
    items: list[PricedItem]
    total: Decimal
    tax: Decimal
    discount: Decimal
    final_total: Decimal


def _active_product(db: Session, product_id: str) -> Product | None:
    return (
        db.query(Product)
        .filter(Product.id == product_id, Product.deleted_at.is_(None))
        .first()
    )


def price_order(db: Session, data: OrderCreate, tolerance: Decimal | None = None) -> PricedOrder:
    if tolerance is None:
        tolerance = settings.PRICE_TOLERANCE

    items: list[PricedItem] = []
    computed_total = Decimal("0")
    for item in data.items:
        product = _active_product(db, item.product_id)
        if not product:
            raise PosError.product_not_found(item.product_id)
        unit_price = _to_cents(Decimal(str(product.selling_price)))
        subtotal = unit_price * item.quantity
        computed_total += subtotal
        items.append(
            PricedItem(
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                unit_price=unit_price,
                subtotal=subtotal,
            )
        )

    # Everything compared below is what gets stored in the Numeric(12, 2) columns
    tax = _to_cents(data.tax)
    discount = _to_cents(data.discount)
    computed_final_total = computed_total + tax - discount

    if abs(computed_total - data.total) > tolerance:
        logger.warning("Total mismatch detected. Client: %s, Server: %s", data.total, computed_total)
        raise PosError.pricing_mismatch("total", computed_total, data.total)

    if abs(computed_final_total - data.final_total) > tolerance:
        logger.warning(
            "Final total mismatch detected. Client: %s, Server: %s", data.final_total, computed_final_total
        )
        raise PosError.pricing_mismatch("final_total", computed_final_total, data.final_total)

    return PricedOrder(
        items=items,
        total=computed_total,
        tax=tax,
        discount=discount,
        final_total=computed_final_total,
    )
