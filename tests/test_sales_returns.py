from decimal import Decimal

import pytest

from conftest import make_order, make_product, stock_of
from pos_backend.errors import ErrorKind, PosError
from pos_backend.models.sales_return import ReturnStatus
from pos_backend.models.stock_movement import MovementDirection
from pos_backend.schemas.sales_return import SalesReturnCreate
from pos_backend.services import order_service, product_service, sales_return_service, stock_movement_service


@pytest.fixture
def sold(db):
    product = make_product(db, price="5.00", stock=10)
    order = order_service.create_order(db, make_order([(product, 4)]))
    return product, order


def _return(order, product, quantity=2, status=ReturnStatus.PENDING):
    return SalesReturnCreate(
        order_id=order.id,
        product_id=product.id,
        quantity=quantity,
        unit_price=Decimal("5.00"),
        total_amount=Decimal("5.00") * quantity,
        reason="Damaged",
        status=status,
    )


def test_pending_return_does_not_touch_stock(db, sold):
    product, order = sold

    sr = sales_return_service.create_sales_return(db, _return(order, product))

    assert sr.status == ReturnStatus.PENDING
    assert sr.product_name == product.name
    assert stock_of(db, product.id) == 6


def test_approved_on_creation_puts_stock_back(db, sold):
    product, order = sold

    sr = sales_return_service.create_sales_return(db, _return(order, product, status=ReturnStatus.APPROVED))

    assert stock_of(db, product.id) == 8
    [movement] = stock_movement_service.list_by_reference(db, sr.id)
    assert movement.direction == MovementDirection.IN
    assert movement.reason == "Sales return - Damaged"


def test_status_transitions_follow_stock(db, sold):
    product, order = sold
    sr = sales_return_service.create_sales_return(db, _return(order, product))

    sales_return_service.update_status(db, sr.id, ReturnStatus.APPROVED)
    assert stock_of(db, product.id) == 8

    # Same status again is a no-op
    sales_return_service.update_status(db, sr.id, ReturnStatus.APPROVED)
    assert stock_of(db, product.id) == 8

    updated = sales_return_service.update_status(db, sr.id, ReturnStatus.REJECTED)
    assert updated.status == ReturnStatus.REJECTED
    assert stock_of(db, product.id) == 6
    assert len(stock_movement_service.list_by_reference(db, sr.id)) == 2

    assert sales_return_service.update_status(db, "nope", ReturnStatus.APPROVED) is None


def test_delete_approved_return_takes_stock_back(db, sold):
    product, order = sold
    sr = sales_return_service.create_sales_return(db, _return(order, product, status=ReturnStatus.APPROVED))
    sr_id = sr.id

    assert sales_return_service.delete_sales_return(db, sr_id) is True

    assert stock_of(db, product.id) == 6
    assert sales_return_service.get_sales_return(db, sr_id) is None


def test_return_for_unknown_order(db, sold):
    product, order = sold
    data = _return(order, product)
    data.order_id = "nope"

    with pytest.raises(PosError) as exc_info:
        sales_return_service.create_sales_return(db, data)
    assert exc_info.value.kind == ErrorKind.ORDER_NOT_FOUND


def test_list_by_status(db, sold):
    product, order = sold
    sales_return_service.create_sales_return(db, _return(order, product))
    sales_return_service.create_sales_return(db, _return(order, product, quantity=1, status=ReturnStatus.APPROVED))

    approved = sales_return_service.list_sales_returns(db, status=ReturnStatus.APPROVED)

    assert [sr.quantity for sr in approved] == [1]
    assert len(sales_return_service.list_sales_returns(db)) == 2


def test_reversing_return_after_product_soft_deleted(db, sold):
    product, order = sold
    kept = sales_return_service.create_sales_return(db, _return(order, product, status=ReturnStatus.APPROVED))
    dropped = sales_return_service.create_sales_return(
        db, _return(order, product, quantity=1, status=ReturnStatus.APPROVED)
    )
    dropped_id = dropped.id
    assert stock_of(db, product.id) == 9
    product_service.delete_product(db, product.id)

    updated = sales_return_service.update_status(db, kept.id, ReturnStatus.REJECTED)
    assert updated.status == ReturnStatus.REJECTED
    assert sales_return_service.delete_sales_return(db, dropped_id) is True

    assert stock_of(db, product.id) == 6
    assert len(stock_movement_service.list_by_reference(db, dropped_id)) == 2
