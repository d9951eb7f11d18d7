from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from pos_backend.database import get_db
from pos_backend.models.sales_return import ReturnStatus
from pos_backend.schemas.sales_return import SalesReturnCreate, SalesReturnOut, SalesReturnStatusUpdate
from pos_backend.services import sales_return_service

router = APIRouter(prefix="/sales-returns", tags=["Sales Returns"])


@router.post("", response_model=SalesReturnOut, status_code=201)
def create_sales_return(data: SalesReturnCreate, db: Session = Depends(get_db)):
    return sales_return_service.create_sales_return(db, data)


@router.get("", response_model=list[SalesReturnOut])
def list_sales_returns(
    skip: int = 0, limit: int = 100, status: ReturnStatus | None = None, db: Session = Depends(get_db)
):
    return sales_return_service.list_sales_returns(db, skip=skip, limit=limit, status=status)


@router.get("/{sr_id}", response_model=SalesReturnOut)
def get_sales_return(sr_id: str, db: Session = Depends(get_db)):
    sr = sales_return_service.get_sales_return(db, sr_id)
    if not sr:
        raise HTTPException(404, "Sales return not found")
    return sr


@router.post("/{sr_id}/status", response_model=SalesReturnOut)
def update_status(sr_id: str, data: SalesReturnStatusUpdate, db: Session = Depends(get_db)):
    sr = sales_return_service.update_status(db, sr_id, data.status)
    if not sr:
        raise HTTPException(404, "Sales return not found")
    return sr


@router.delete("/{sr_id}", status_code=204)
def delete_sales_return(sr_id: str, db: Session = Depends(get_db)):
    if not sales_return_service.delete_sales_return(db, sr_id):
        raise HTTPException(404, "Sales return not found")
    return Response(status_code=204)
