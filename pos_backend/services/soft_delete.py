"""Soft-delete lifecycle shared by orders and products.

Active -> SoftDeleted (``soft_delete``) -> Active (``restore``), or any state
-> Purged (``purge``, terminal). Read paths go through ``active`` so hidden
rows never leak into list or get results.
"""

import logging
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy.orm import Query, Session

from pos_backend.logging_config import IRREVERSIBLE
from pos_backend.models.mixins import SoftDeleteMixin

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SoftDeleteMixin)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def active(db: Session, model: type[T]) -> Query:
    return db.query(model).filter(model.deleted_at.is_(None))


def get_active(db: Session, model: type[T], entity_id: str) -> T | None:
    return active(db, model).filter(model.id == entity_id).first()


def soft_delete(db: Session, model: type[T], entity_id: str) -> T | None:
    """Stamp ``deleted_at``. Deleting twice just moves the stamp forward."""
    entity = db.get(model, entity_id)
    if not entity:
        return None
    entity.deleted_at = _utcnow()
    db.commit()
    db.refresh(entity)
    logger.info("%s %s soft deleted", model.__name__, entity_id)
    return entity


def restore(db: Session, model: type[T], entity_id: str) -> T | None:
    entity = db.get(model, entity_id)
    if not entity:
        return None
    if entity.deleted_at is not None:
        entity.deleted_at = None
        db.commit()
        db.refresh(entity)
        logger.info("%s %s restored", model.__name__, entity_id)
    return entity


def purge(db: Session, model: type[T], entity_id: str) -> bool:
    """Permanently remove the row, whatever its soft-delete state."""
    entity = db.get(model, entity_id)
    if not entity:
        return False
    logger.log(IRREVERSIBLE, "HARD DELETING %s %s - this action is irreversible", model.__name__, entity_id)
    db.delete(entity)
    db.commit()
    logger.log(IRREVERSIBLE, "%s %s permanently deleted", model.__name__, entity_id)
    return True
