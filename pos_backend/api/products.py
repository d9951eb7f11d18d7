from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from pos_backend.database import get_db
from pos_backend.schemas.product import ProductCreate, ProductOut, ProductUpdate, StockAdjust
from pos_backend.schemas.stock_movement import StockMovementOut
from pos_backend.services import product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.post("", response_model=ProductOut, status_code=201)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    return product_service.create_product(db, data)


@router.get("", response_model=list[ProductOut])
def list_products(
    skip: int = 0,
    limit: int = 100,
    category_id: str | None = None,
    supplier_id: str | None = None,
    q: str | None = None,
    db: Session = Depends(get_db),
):
    return product_service.list_products(
        db, skip=skip, limit=limit, category_id=category_id, supplier_id=supplier_id, search=q
    )


@router.get("/low-stock", response_model=list[ProductOut])
def low_stock(db: Session = Depends(get_db)):
    return product_service.get_low_stock(db)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = product_service.get_product(db, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: str, data: ProductUpdate, db: Session = Depends(get_db)):
    product = product_service.update_product(db, product_id, data)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.post("/{product_id}/adjust-stock", response_model=ProductOut)
def adjust_stock(product_id: str, data: StockAdjust, db: Session = Depends(get_db)):
    try:
        product = product_service.adjust_stock(db, product_id, data)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.get("/{product_id}/movements", response_model=list[StockMovementOut])
def get_movements(product_id: str, db: Session = Depends(get_db)):
    if not product_service.get_product(db, product_id):
        raise HTTPException(404, "Product not found")
    return product_service.get_movements(db, product_id)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    if not product_service.delete_product(db, product_id):
        raise HTTPException(404, "Product not found")
    return Response(status_code=204)


@router.post("/{product_id}/restore", response_model=ProductOut)
def restore_product(product_id: str, db: Session = Depends(get_db)):
    product = product_service.restore_product(db, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product
