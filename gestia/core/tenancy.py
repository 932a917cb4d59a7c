"""
Tenant-scoped query helpers.

Reads always conjoin the record id with the caller's company id. Updates and
deletes put the company id in the same statement as the mutation, so a record
owned by another tenant is simply not matched and the caller gets NotFound.
"""

from typing import Any, Dict, Optional, Sequence, Type, TypeVar
import uuid

from sqlalchemy import delete, update
from sqlmodel import Session, SQLModel, select
import structlog

from gestia.core.errors import NotFound

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)

IMMUTABLE_FIELDS = frozenset({"id", "company_id"})


def _label(model: Type[SQLModel], label: Optional[str]) -> str:
    return label or model.__name__


def scoped_select(model: Type[ModelT], company_id: uuid.UUID):
    """SELECT restricted to one company"""
    return select(model).where(model.company_id == company_id)


def scoped_get(
    session: Session,
    model: Type[ModelT],
    company_id: uuid.UUID,
    record_id: uuid.UUID,
    label: Optional[str] = None,
) -> ModelT:
    """Fetch by (id, company_id); absent and foreign records both raise NotFound"""
    record = session.exec(
        scoped_select(model, company_id).where(model.id == record_id)
    ).first()
    if record is None:
        raise NotFound(f"{_label(model, label)} not found")
    return record


def scoped_update(
    session: Session,
    model: Type[ModelT],
    company_id: uuid.UUID,
    record_id: uuid.UUID,
    values: Dict[str, Any],
    label: Optional[str] = None,
    conditions: Sequence[Any] = (),
) -> int:
    """Conditional UPDATE on (id, company_id) plus any extra `conditions`;
    zero matched rows raises NotFound"""
    forbidden = IMMUTABLE_FIELDS.intersection(values)
    if forbidden:
        raise ValueError(f"Cannot modify immutable fields: {sorted(forbidden)}")

    result = session.exec(
        update(model)
        .where(model.id == record_id, model.company_id == company_id, *conditions)
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        raise NotFound(f"{_label(model, label)} not found")

    logger.debug("scoped_update", model=model.__name__, record_id=str(record_id))
    return result.rowcount


def scoped_delete(
    session: Session,
    model: Type[ModelT],
    company_id: uuid.UUID,
    record_id: uuid.UUID,
    label: Optional[str] = None,
) -> int:
    """Conditional DELETE on (id, company_id); zero matched rows raises NotFound"""
    result = session.exec(
        delete(model)
        .where(model.id == record_id, model.company_id == company_id)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        raise NotFound(f"{_label(model, label)} not found")

    logger.debug("scoped_delete", model=model.__name__, record_id=str(record_id))
    return result.rowcount
