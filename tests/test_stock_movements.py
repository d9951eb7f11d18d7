import pytest

from conftest import make_product
from pos_backend.errors import ErrorKind, ImmutableRecordError, PosError
from pos_backend.models.stock_movement import MovementDirection, StockMovement
from pos_backend.services import stock_movement_service


def test_record_movement_snapshots_product_name(db):
    product = make_product(db, name="Oat milk", stock=0)

    movement = stock_movement_service.record_movement(
        db, product.id, 12, MovementDirection.IN, "Delivery", reference_id="po-1"
    )

    assert movement.id
    assert movement.product_name == "Oat milk"
    assert movement.direction == MovementDirection.IN
    assert movement.reference_id == "po-1"
    assert movement.created_at is not None


def test_opening_stock_is_recorded(db):
    product = make_product(db, stock=7)

    [movement] = stock_movement_service.list_movements(db, product_id=product.id)

    assert movement.direction == MovementDirection.IN
    assert movement.quantity == 7
    assert movement.reference_id is None


def test_record_movement_unknown_product(db):
    with pytest.raises(PosError) as exc_info:
        stock_movement_service.record_movement(db, "nope", 1, MovementDirection.OUT, "Sale")
    assert exc_info.value.kind == ErrorKind.PRODUCT_NOT_FOUND


def test_record_movement_rejects_zero_quantity(db):
    product = make_product(db)
    with pytest.raises(ValueError):
        stock_movement_service.record_movement(db, product.id, 0, MovementDirection.OUT, "Sale")


def test_movements_cannot_be_edited(db):
    product = make_product(db, stock=3)
    [movement] = stock_movement_service.list_movements(db, product_id=product.id)

    movement.quantity = 300
    with pytest.raises(ImmutableRecordError):
        db.commit()
    db.rollback()

    db.expire_all()
    assert db.get(StockMovement, movement.id).quantity == 3


def test_movements_cannot_be_deleted(db):
    product = make_product(db, stock=3)
    [movement] = stock_movement_service.list_movements(db, product_id=product.id)

    db.delete(movement)
    with pytest.raises(ImmutableRecordError):
        db.flush()
    db.rollback()

    assert db.query(StockMovement).count() == 1


def test_list_by_reference(db):
    product = make_product(db, stock=0)
    stock_movement_service.record_movement(db, product.id, 1, MovementDirection.IN, "a", reference_id="r1")
    stock_movement_service.record_movement(db, product.id, 2, MovementDirection.IN, "b", reference_id="r2")

    movements = stock_movement_service.list_by_reference(db, "r1")

    assert [m.quantity for m in movements] == [1]
