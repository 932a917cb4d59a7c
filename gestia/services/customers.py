"""
Customer records, always scoped to the caller's company
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional
import uuid

from sqlmodel import Session
import structlog

from gestia.core.config import get_settings
from gestia.core.events import CUSTOMERS_VIEW, revalidate_path
from gestia.core.permissions import Operation, authorize
from gestia.core.session import SessionContext
from gestia.core.tenancy import scoped_delete, scoped_get, scoped_select, scoped_update
from gestia.models.customer import Customer
from gestia.schemas.customer import CustomerCreate, CustomerUpdate
from gestia.schemas.validation import parse_input

logger = structlog.get_logger(__name__)


def normalize_phone(phone: str, default_prefix: Optional[str] = None) -> str:
    """Strip whitespace and prepend the default country prefix when missing"""
    if default_prefix is None:
        default_prefix = get_settings().DEFAULT_PHONE_PREFIX
    normalized = "".join(phone.split())
    if not normalized.startswith("+"):
        normalized = default_prefix + normalized
    return normalized


REQUIRED_FIELDS = ("first_name", "last_name")


def _customer_values(data: Mapping[str, Any]) -> dict:
    values = {
        key: value for key, value in data.items()
        if not (key in REQUIRED_FIELDS and value is None)
    }
    if "phone" in values:
        phone = values.pop("phone")
        if phone is not None:
            values["phone_e164"] = normalize_phone(phone)
    if values.get("fiscal_code"):
        values["fiscal_code"] = values["fiscal_code"].upper()
    return values


def list_customers(db: Session, session: Optional[SessionContext]) -> List[Customer]:
    """All customers of the current company, newest first"""
    company_id = authorize(session, Operation.CUSTOMER_READ)
    return list(db.exec(
        scoped_select(Customer, company_id).order_by(Customer.created_at.desc())
    ).all())


def get_customer(
    db: Session,
    session: Optional[SessionContext],
    customer_id: uuid.UUID,
) -> Customer:
    company_id = authorize(session, Operation.CUSTOMER_READ)
    return scoped_get(db, Customer, company_id, customer_id, label="Customer")


def create_customer(
    db: Session,
    session: Optional[SessionContext],
    data: Mapping[str, Any],
) -> Customer:
    """Create a customer; the company always comes from the session"""
    company_id = authorize(session, Operation.CUSTOMER_WRITE)
    payload = parse_input(CustomerCreate, data)

    customer = Customer(company_id=company_id, **_customer_values(payload.model_dump()))
    db.add(customer)
    db.commit()
    db.refresh(customer)

    logger.info("customer_created", customer_id=str(customer.id), company_id=str(company_id))
    revalidate_path(company_id, CUSTOMERS_VIEW)
    return customer


def update_customer(
    db: Session,
    session: Optional[SessionContext],
    customer_id: uuid.UUID,
    data: Mapping[str, Any],
) -> Customer:
    """Partial update of the fields present in the payload"""
    company_id = authorize(session, Operation.CUSTOMER_WRITE)
    payload = parse_input(CustomerUpdate, data)

    values = _customer_values(payload.model_dump(exclude_unset=True))
    values["updated_at"] = datetime.utcnow()
    scoped_update(db, Customer, company_id, customer_id, values, label="Customer")
    db.commit()

    customer = scoped_get(db, Customer, company_id, customer_id, label="Customer")
    logger.info("customer_updated", customer_id=str(customer_id), company_id=str(company_id))
    revalidate_path(company_id, CUSTOMERS_VIEW)
    return customer


def delete_customer(
    db: Session,
    session: Optional[SessionContext],
    customer_id: uuid.UUID,
) -> None:
    company_id = authorize(session, Operation.CUSTOMER_WRITE)

    scoped_delete(db, Customer, company_id, customer_id, label="Customer")
    db.commit()

    logger.info("customer_deleted", customer_id=str(customer_id), company_id=str(company_id))
    revalidate_path(company_id, CUSTOMERS_VIEW)
