"""
Calendar appointments.

Any customer or operator referenced by an appointment must belong to the
caller's company; a foreign id is reported exactly like a missing one.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional
import uuid

from sqlmodel import Session
import structlog

from gestia.core.events import CALENDAR_VIEW, revalidate_path
from gestia.core.permissions import Operation, authorize
from gestia.core.session import SessionContext
from gestia.core.tenancy import scoped_delete, scoped_get, scoped_select, scoped_update
from gestia.models.appointment import Appointment, AppointmentStatus
from gestia.models.customer import Customer
from gestia.models.user import User
from gestia.schemas.appointment import (
    AppointmentCreate, AppointmentRange, AppointmentReschedule, AppointmentUpdate,
)
from gestia.schemas.validation import parse_input

logger = structlog.get_logger(__name__)


def _check_references(
    db: Session,
    company_id: uuid.UUID,
    customer_id: uuid.UUID,
    user_id: Optional[uuid.UUID],
) -> None:
    scoped_get(db, Customer, company_id, customer_id, label="Customer")
    if user_id is not None:
        scoped_get(db, User, company_id, user_id, label="Operator")


def list_appointments(
    db: Session,
    session: Optional[SessionContext],
    start: datetime,
    end: datetime,
) -> List[Appointment]:
    """Appointments fully contained in [start, end], earliest first"""
    company_id = authorize(session, Operation.APPOINTMENT_READ)
    window = parse_input(AppointmentRange, {"start": start, "end": end})

    return list(db.exec(
        scoped_select(Appointment, company_id)
        .where(
            Appointment.start_time >= window.start,
            Appointment.end_time <= window.end,
        )
        .order_by(Appointment.start_time.asc())
    ).all())


def list_customer_appointments(
    db: Session,
    session: Optional[SessionContext],
    customer_id: uuid.UUID,
) -> List[Appointment]:
    """A customer's appointment history, most recent first"""
    company_id = authorize(session, Operation.APPOINTMENT_READ)

    return list(db.exec(
        scoped_select(Appointment, company_id)
        .where(Appointment.customer_id == customer_id)
        .order_by(Appointment.start_time.desc())
    ).all())


def get_appointment(
    db: Session,
    session: Optional[SessionContext],
    appointment_id: uuid.UUID,
) -> Appointment:
    company_id = authorize(session, Operation.APPOINTMENT_READ)
    return scoped_get(db, Appointment, company_id, appointment_id, label="Appointment")


def create_appointment(
    db: Session,
    session: Optional[SessionContext],
    data: Mapping[str, Any],
) -> Appointment:
    company_id = authorize(session, Operation.APPOINTMENT_WRITE)
    payload = parse_input(AppointmentCreate, data)
    _check_references(db, company_id, payload.customer_id, payload.user_id)

    appointment = Appointment(
        company_id=company_id,
        customer_id=payload.customer_id,
        user_id=payload.user_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        service_type=payload.service_type,
        price=payload.price,
        status=payload.status or AppointmentStatus.SCHEDULED,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    logger.info("appointment_created", appointment_id=str(appointment.id), company_id=str(company_id))
    revalidate_path(company_id, CALENDAR_VIEW)
    return appointment


def update_appointment(
    db: Session,
    session: Optional[SessionContext],
    appointment_id: uuid.UUID,
    data: Mapping[str, Any],
) -> Appointment:
    """Full edit: customer, dates, service, price, status and operator"""
    company_id = authorize(session, Operation.APPOINTMENT_WRITE)
    payload = parse_input(AppointmentUpdate, data)
    _check_references(db, company_id, payload.customer_id, payload.user_id)

    scoped_update(db, Appointment, company_id, appointment_id, {
        "customer_id": payload.customer_id,
        "user_id": payload.user_id,
        "start_time": payload.start_time,
        "end_time": payload.end_time,
        "service_type": payload.service_type,
        "price": payload.price,
        "status": payload.status or AppointmentStatus.SCHEDULED,
        "updated_at": datetime.utcnow(),
    }, label="Appointment")
    db.commit()

    logger.info("appointment_updated", appointment_id=str(appointment_id), company_id=str(company_id))
    revalidate_path(company_id, CALENDAR_VIEW)
    return scoped_get(db, Appointment, company_id, appointment_id, label="Appointment")


def reschedule_appointment(
    db: Session,
    session: Optional[SessionContext],
    appointment_id: uuid.UUID,
    start_time: datetime,
    end_time: datetime,
) -> Appointment:
    """Move an appointment (drag and drop); nothing but the dates changes"""
    company_id = authorize(session, Operation.APPOINTMENT_WRITE)
    payload = parse_input(AppointmentReschedule, {"start_time": start_time, "end_time": end_time})

    scoped_update(db, Appointment, company_id, appointment_id, {
        "start_time": payload.start_time,
        "end_time": payload.end_time,
        "updated_at": datetime.utcnow(),
    }, label="Appointment")
    db.commit()

    logger.info("appointment_rescheduled", appointment_id=str(appointment_id), company_id=str(company_id))
    revalidate_path(company_id, CALENDAR_VIEW)
    return scoped_get(db, Appointment, company_id, appointment_id, label="Appointment")


def delete_appointment(
    db: Session,
    session: Optional[SessionContext],
    appointment_id: uuid.UUID,
) -> None:
    company_id = authorize(session, Operation.APPOINTMENT_WRITE)

    scoped_delete(db, Appointment, company_id, appointment_id, label="Appointment")
    db.commit()

    logger.info("appointment_deleted", appointment_id=str(appointment_id), company_id=str(company_id))
    revalidate_path(company_id, CALENDAR_VIEW)
