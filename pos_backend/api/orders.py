from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from pos_backend.database import get_db
from pos_backend.models.order import OrderType
from pos_backend.schemas.order import OrderCreate, OrderOut, OrderUpdate
from pos_backend.schemas.stock_movement import StockMovementOut
from pos_backend.services import order_service, stock_movement_service

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(data: OrderCreate, db: Session = Depends(get_db)):
    # PosError (empty order, pricing, stock) is mapped to a status by the app handler
    return order_service.create_order(db, data)


@router.get("", response_model=list[OrderOut])
def list_orders(skip: int = 0, limit: int = 100, order_type: OrderType | None = None, db: Session = Depends(get_db)):
    return order_service.list_orders(db, skip=skip, limit=limit, order_type=order_type)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    order = order_service.get_order(db, order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    return order


@router.get("/{order_id}/movements", response_model=list[StockMovementOut])
def get_order_movements(order_id: str, db: Session = Depends(get_db)):
    if not order_service.get_order(db, order_id):
        raise HTTPException(404, "Order not found")
    return stock_movement_service.list_by_reference(db, order_id)


@router.patch("/{order_id}", response_model=OrderOut)
def update_order(order_id: str, data: OrderUpdate, db: Session = Depends(get_db)):
    order = order_service.update_order(db, order_id, data)
    if not order:
        raise HTTPException(404, "Order not found")
    return order


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    """Soft delete. Stock sold by the order is not returned."""
    if not order_service.delete_order(db, order_id):
        raise HTTPException(404, "Order not found")
    return Response(status_code=204)


@router.post("/{order_id}/restore", response_model=OrderOut)
def restore_order(order_id: str, db: Session = Depends(get_db)):
    order = order_service.restore_order(db, order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    return order
