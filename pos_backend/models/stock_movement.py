import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, DateTime, Enum, Integer, String, Text, event, func
from sqlalchemy.orm import Mapped, mapped_column

from pos_backend.database import Base
from pos_backend.errors import ImmutableRecordError


class MovementDirection(str, PyEnum):
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"


class StockMovement(Base):
    """Append-only audit record of one inventory change.

    The product's ``stock`` column stays authoritative; movements are never
    summed to derive it.
    """

    __tablename__ = "stock_movements"
    __table_args__ = (CheckConstraint("quantity > 0", name="ck_stock_movements_quantity_positive"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String, nullable=False)  # snapshot at record time
    direction: Mapped[str] = mapped_column(
        Enum(MovementDirection, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    reference_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)  # order, purchase or return id
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


@event.listens_for(StockMovement, "before_update")
def _reject_movement_update(mapper, connection, target):
    raise ImmutableRecordError(f"Stock movement {target.id} is immutable; record a compensating movement instead")


@event.listens_for(StockMovement, "before_delete")
def _reject_movement_delete(mapper, connection, target):
    raise ImmutableRecordError(f"Stock movement {target.id} cannot be deleted")
