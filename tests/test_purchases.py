from decimal import Decimal

import pytest

from conftest import make_product, stock_of
from pos_backend.errors import ErrorKind, PosError
from pos_backend.models.stock_movement import MovementDirection
from pos_backend.schemas.purchase import PurchaseCreate, PurchaseUpdate
from pos_backend.services import inventory_ledger, product_service, purchase_service, stock_movement_service


def _purchase(product, quantity=10):
    return PurchaseCreate(
        product_id=product.id,
        quantity=quantity,
        cost_price=Decimal("2.00"),
        total_cost=Decimal("2.00") * quantity,
        supplier="Bean Co",
    )


def test_create_purchase_adds_stock(db):
    product = make_product(db, stock=1)

    purchase = purchase_service.create_purchase(db, _purchase(product, 10))

    assert purchase.product_name == product.name
    assert stock_of(db, product.id) == 11
    [movement] = stock_movement_service.list_by_reference(db, purchase.id)
    assert movement.direction == MovementDirection.IN
    assert movement.reason == "Purchase from Bean Co"


def test_create_purchase_unknown_product(db):
    product = make_product(db)
    data = _purchase(product)
    data.product_id = "nope"

    with pytest.raises(PosError) as exc_info:
        purchase_service.create_purchase(db, data)
    assert exc_info.value.kind == ErrorKind.PRODUCT_NOT_FOUND


def test_update_quantity_books_the_difference(db):
    product = make_product(db, stock=0)
    purchase = purchase_service.create_purchase(db, _purchase(product, 10))

    purchase_service.update_purchase(db, purchase.id, PurchaseUpdate(quantity=15))
    assert stock_of(db, product.id) == 15

    purchase_service.update_purchase(db, purchase.id, PurchaseUpdate(quantity=12))
    assert stock_of(db, product.id) == 12

    directions = [m.direction for m in stock_movement_service.list_by_reference(db, purchase.id)]
    assert sorted(directions) == sorted([MovementDirection.IN, MovementDirection.IN, MovementDirection.OUT])


def test_lowering_quantity_below_sold_stock_fails(db):
    product = make_product(db, stock=0)
    purchase = purchase_service.create_purchase(db, _purchase(product, 10))
    purchase_service.update_purchase(db, purchase.id, PurchaseUpdate(notes="checked"))

    inventory_ledger.reserve(db, product.id, 8)
    db.commit()

    with pytest.raises(PosError) as exc_info:
        purchase_service.update_purchase(db, purchase.id, PurchaseUpdate(quantity=5))

    assert exc_info.value.kind == ErrorKind.INSUFFICIENT_STOCK
    assert stock_of(db, product.id) == 2
    assert purchase_service.get_purchase(db, purchase.id).quantity == 10


def test_delete_purchase_reverses_stock(db):
    product = make_product(db, stock=3)
    purchase = purchase_service.create_purchase(db, _purchase(product, 10))
    purchase_id = purchase.id

    assert purchase_service.delete_purchase(db, purchase_id) is True

    assert stock_of(db, product.id) == 3
    assert purchase_service.get_purchase(db, purchase_id) is None
    # The audit trail outlives the purchase
    assert len(stock_movement_service.list_by_reference(db, purchase_id)) == 2
    assert purchase_service.delete_purchase(db, purchase_id) is False


def test_purchase_reversal_after_product_soft_deleted(db):
    product = make_product(db, stock=0)
    purchase = purchase_service.create_purchase(db, _purchase(product, 10))
    purchase_id = purchase.id
    product_service.delete_product(db, product.id)

    purchase_service.update_purchase(db, purchase_id, PurchaseUpdate(quantity=6))
    assert stock_of(db, product.id) == 6

    assert purchase_service.delete_purchase(db, purchase_id) is True
    assert stock_of(db, product.id) == 0
