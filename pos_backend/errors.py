"""Failure kinds raised by the order, inventory and movement services.

Every client-facing failure is a ``PosError`` tagged with an ``ErrorKind``.
Callers branch on ``error.kind`` and read the diagnostic values from
``error.detail``; the HTTP layer maps kinds to status codes in one table.
"""

from decimal import Decimal
from enum import Enum


class ErrorKind(str, Enum):
    EMPTY_ORDER = "empty_order"
    PRODUCT_NOT_FOUND = "product_not_found"
    ORDER_NOT_FOUND = "order_not_found"
    PRICING_MISMATCH = "pricing_mismatch"
    INSUFFICIENT_STOCK = "insufficient_stock"
    TRANSACTION_ABORTED = "transaction_aborted"
    COMPENSATION_FAILED = "compensation_failed"


class PosError(Exception):
    def __init__(self, kind: ErrorKind, message: str, **detail):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        payload = {"error": self.kind.value, "message": self.message}
        for key, value in self.detail.items():
            payload[key] = float(value) if isinstance(value, Decimal) else value
        return payload

    @classmethod
    def empty_order(cls) -> "PosError":
        return cls(ErrorKind.EMPTY_ORDER, "Order must contain at least one item")

    @classmethod
    def product_not_found(cls, product_id: str) -> "PosError":
        return cls(ErrorKind.PRODUCT_NOT_FOUND, f"Product {product_id} not found", product_id=product_id)

    @classmethod
    def order_not_found(cls, order_id: str) -> "PosError":
        return cls(ErrorKind.ORDER_NOT_FOUND, f"Order {order_id} not found", order_id=order_id)

    @classmethod
    def pricing_mismatch(cls, field: str, computed: Decimal, received: Decimal) -> "PosError":
        return cls(
            ErrorKind.PRICING_MISMATCH,
            f"{field} validation failed. Expected: {computed:.2f}, Received: {received}",
            field=field,
            computed=computed,
            received=received,
        )

    @classmethod
    def insufficient_stock(
        cls, product_id: str, product_name: str, available: int, requested: int
    ) -> "PosError":
        return cls(
            ErrorKind.INSUFFICIENT_STOCK,
            f"Insufficient stock for {product_name}. Available: {available}, Required: {requested}",
            product_id=product_id,
            available=available,
            requested=requested,
        )

    @classmethod
    def transaction_aborted(cls, reason: str) -> "PosError":
        return cls(ErrorKind.TRANSACTION_ABORTED, f"Transaction rolled back: {reason}")

    @classmethod
    def compensation_failed(cls, product_id: str, quantity: int, reason: str) -> "PosError":
        return cls(
            ErrorKind.COMPENSATION_FAILED,
            f"Failed to release {quantity} units of product {product_id}: {reason}",
            product_id=product_id,
            quantity=quantity,
        )


class ImmutableRecordError(RuntimeError):
    """Raised when code tries to change or delete an audit record."""
