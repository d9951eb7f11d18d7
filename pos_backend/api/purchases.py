from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from pos_backend.database import get_db
from pos_backend.schemas.purchase import PurchaseCreate, PurchaseOut, PurchaseUpdate
from pos_backend.services import purchase_service

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.post("", response_model=PurchaseOut, status_code=201)
def create_purchase(data: PurchaseCreate, db: Session = Depends(get_db)):
    return purchase_service.create_purchase(db, data)


@router.get("", response_model=list[PurchaseOut])
def list_purchases(skip: int = 0, limit: int = 100, product_id: str | None = None, db: Session = Depends(get_db)):
    return purchase_service.list_purchases(db, skip=skip, limit=limit, product_id=product_id)


@router.get("/{purchase_id}", response_model=PurchaseOut)
def get_purchase(purchase_id: str, db: Session = Depends(get_db)):
    purchase = purchase_service.get_purchase(db, purchase_id)
    if not purchase:
        raise HTTPException(404, "Purchase not found")
    return purchase


@router.patch("/{purchase_id}", response_model=PurchaseOut)
def update_purchase(purchase_id: str, data: PurchaseUpdate, db: Session = Depends(get_db)):
    purchase = purchase_service.update_purchase(db, purchase_id, data)
    if not purchase:
        raise HTTPException(404, "Purchase not found")
    return purchase


@router.delete("/{purchase_id}", status_code=204)
def delete_purchase(purchase_id: str, db: Session = Depends(get_db)):
    if not purchase_service.delete_purchase(db, purchase_id):
        raise HTTPException(404, "Purchase not found")
    return Response(status_code=204)
