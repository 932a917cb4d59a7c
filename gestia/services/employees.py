"""
Team administration: ADMIN-only management of the company's users.

Users are never hard-deleted; toggling `is_active` disables login while
keeping appointments and conversations that reference them intact.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional
import uuid

from sqlalchemy import not_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
import structlog

from gestia.core.errors import Conflict
from gestia.core.events import EMPLOYEES_VIEW, revalidate_path
from gestia.core.permissions import Operation, authorize
from gestia.core.security import hash_password
from gestia.core.session import SessionContext
from gestia.core.tenancy import scoped_get, scoped_select, scoped_update
from gestia.models.user import User
from gestia.schemas.employee import EmployeeCreate, EmployeeUpdate
from gestia.schemas.validation import parse_input

logger = structlog.get_logger(__name__)

DUPLICATE_EMAIL = "An employee with this email already exists"


def list_employees(db: Session, session: Optional[SessionContext]) -> List[User]:
    """All users of the current company, newest first"""
    company_id = authorize(session, Operation.EMPLOYEE_READ)
    return list(db.exec(
        scoped_select(User, company_id).order_by(User.created_at.desc())
    ).all())


def create_employee(
    db: Session,
    session: Optional[SessionContext],
    data: Mapping[str, Any],
) -> User:
    company_id = authorize(session, Operation.EMPLOYEE_MANAGE)
    payload = parse_input(EmployeeCreate, data)

    # Emails are unique across every company
    if db.exec(select(User.id).where(User.email == payload.email)).first() is not None:
        raise Conflict(DUPLICATE_EMAIL, details={"field_errors": {"email": DUPLICATE_EMAIL}})

    employee = User(
        company_id=company_id,
        name=payload.name,
        email=payload.email,
        role=payload.role,
        password_hash=hash_password(payload.password),
        is_active=True,
    )
    db.add(employee)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(DUPLICATE_EMAIL, details={"field_errors": {"email": DUPLICATE_EMAIL}}) from exc
    db.refresh(employee)

    logger.info(
        "employee_created",
        employee_id=str(employee.id),
        role=employee.role.value,
        company_id=str(company_id),
    )
    revalidate_path(company_id, EMPLOYEES_VIEW)
    return employee


def update_employee(
    db: Session,
    session: Optional[SessionContext],
    employee_id: uuid.UUID,
    data: Mapping[str, Any],
) -> User:
    """Change name, role or password; an empty password leaves it unchanged"""
    company_id = authorize(session, Operation.EMPLOYEE_MANAGE)
    payload = parse_input(EmployeeUpdate, data)

    values = {"updated_at": datetime.utcnow()}
    if payload.name is not None:
        values["name"] = payload.name
    if payload.role is not None:
        values["role"] = payload.role
    if payload.password:
        values["password_hash"] = hash_password(payload.password)

    scoped_update(db, User, company_id, employee_id, values, label="Employee")
    db.commit()

    logger.info("employee_updated", employee_id=str(employee_id), company_id=str(company_id))
    revalidate_path(company_id, EMPLOYEES_VIEW)
    return scoped_get(db, User, company_id, employee_id, label="Employee")


def toggle_employee_status(
    db: Session,
    session: Optional[SessionContext],
    employee_id: uuid.UUID,
) -> User:
    """Soft delete or restore; the flip happens in a single conditional UPDATE"""
    company_id = authorize(session, Operation.EMPLOYEE_MANAGE)

    scoped_update(db, User, company_id, employee_id, {
        "is_active": not_(User.is_active),
        "updated_at": datetime.utcnow(),
    }, label="Employee")
    db.commit()

    employee = scoped_get(db, User, company_id, employee_id, label="Employee")
    logger.info(
        "employee_status_toggled",
        employee_id=str(employee_id),
        is_active=employee.is_active,
        company_id=str(company_id),
    )
    revalidate_path(company_id, EMPLOYEES_VIEW)
    return employee
