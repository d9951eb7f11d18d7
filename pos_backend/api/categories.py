from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from pos_backend.database import get_db
from pos_backend.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from pos_backend.services import category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    return category_service.create_category(db, data)


@router.get("", response_model=list[CategoryOut])
def list_categories(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return category_service.list_categories(db, skip=skip, limit=limit)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = category_service.get_category(db, category_id)
    if not category:
        raise HTTPException(404, "Category not found")
    return category


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(category_id: str, data: CategoryUpdate, db: Session = Depends(get_db)):
    category = category_service.update_category(db, category_id, data)
    if not category:
        raise HTTPException(404, "Category not found")
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: str, db: Session = Depends(get_db)):
    if not category_service.delete_category(db, category_id):
        raise HTTPException(404, "Category not found")
    return Response(status_code=204)
