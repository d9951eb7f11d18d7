import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pos_backend.api import admin, categories, orders, products, purchases, sales_returns, stock_movements, suppliers
from pos_backend.config import settings
from pos_backend.database import init_db
from pos_backend.errors import ErrorKind, PosError
from pos_backend.logging_config import configure_logging

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.EMPTY_ORDER: 400,
    ErrorKind.PRICING_MISMATCH: 400,
    ErrorKind.PRODUCT_NOT_FOUND: 404,
    ErrorKind.ORDER_NOT_FOUND: 404,
    ErrorKind.INSUFFICIENT_STOCK: 409,
    ErrorKind.TRANSACTION_ABORTED: 503,
    ErrorKind.COMPENSATION_FAILED: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    init_db()
    if settings.ENABLE_ADMIN_ROUTES:
        logger.warning("Admin purge routes are enabled")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Products, stock movements, and order creation for a point of sale",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(PosError)
async def pos_error_handler(request: Request, exc: PosError):
    status = STATUS_BY_KIND.get(exc.kind, 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return JSON for unhandled exceptions so clients can parse the error."""
    logger.error("Unhandled error: %s\n%s", exc, traceback.format_exc())
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.include_router(products.router, prefix="/api/v1")
app.include_router(orders.router, prefix="/api/v1")
app.include_router(stock_movements.router, prefix="/api/v1")
app.include_router(purchases.router, prefix="/api/v1")
app.include_router(sales_returns.router, prefix="/api/v1")
app.include_router(categories.router, prefix="/api/v1")
app.include_router(suppliers.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
