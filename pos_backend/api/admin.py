from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from pos_backend.config import settings
from pos_backend.database import get_db
from pos_backend.services import order_service, product_service


def require_admin_routes():
    if not settings.ENABLE_ADMIN_ROUTES:
        raise HTTPException(404, "Not Found")


# Irreversible operations; hidden unless ENABLE_ADMIN_ROUTES is set
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin_routes)])


@router.delete("/orders/{order_id}/purge", status_code=204)
def purge_order(order_id: str, db: Session = Depends(get_db)):
    if not order_service.purge_order(db, order_id):
        raise HTTPException(404, "Order not found")
    return Response(status_code=204)


@router.delete("/products/{product_id}/purge", status_code=204)
def purge_product(product_id: str, db: Session = Depends(get_db)):
    if not product_service.purge_product(db, product_id):
        raise HTTPException(404, "Product not found")
    return Response(status_code=204)
