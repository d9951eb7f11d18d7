from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pos_backend.database import get_db
from pos_backend.schemas.stock_movement import StockMovementOut
from pos_backend.services import stock_movement_service

# Read-only: movements are only ever written alongside a stock change
router = APIRouter(prefix="/stock-movements", tags=["Stock Movements"])


@router.get("", response_model=list[StockMovementOut])
def list_movements(skip: int = 0, limit: int = 100, product_id: str | None = None, db: Session = Depends(get_db)):
    return stock_movement_service.list_movements(db, product_id=product_id, skip=skip, limit=limit)


@router.get("/{movement_id}", response_model=StockMovementOut)
def get_movement(movement_id: str, db: Session = Depends(get_db)):
    movement = stock_movement_service.get_movement(db, movement_id)
    if not movement:
        raise HTTPException(404, "Stock movement not found")
    return movement
