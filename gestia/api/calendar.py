"""
Calendar appointments API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
from datetime import datetime
import uuid

from gestia.core.database import get_session
from gestia.core.dependencies import get_session_context
from gestia.core.session import SessionContext
from gestia.schemas.appointment import AppointmentRead
from gestia.services import calendar

router = APIRouter()


@router.get("/", response_model=List[AppointmentRead])
async def list_appointments(
    start: datetime,
    end: datetime,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    """Appointments inside the visible calendar window"""
    return calendar.list_appointments(db, context, start, end)


@router.get("/by-customer/{customer_id}", response_model=List[AppointmentRead])
async def list_customer_appointments(
    customer_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return calendar.list_customer_appointments(db, context, customer_id)


@router.post("/", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return calendar.create_appointment(db, context, appointment_data)


@router.get("/{appointment_id}", response_model=AppointmentRead)
async def get_appointment(
    appointment_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return calendar.get_appointment(db, context, appointment_id)


@router.put("/{appointment_id}", response_model=AppointmentRead)
async def update_appointment(
    appointment_id: uuid.UUID,
    appointment_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return calendar.update_appointment(db, context, appointment_id, appointment_data)


@router.patch("/{appointment_id}/dates", response_model=AppointmentRead)
async def reschedule_appointment(
    appointment_id: uuid.UUID,
    dates: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    """Drag and drop on the calendar"""
    return calendar.reschedule_appointment(
        db, context, appointment_id, dates.get("start_time"), dates.get("end_time"),
    )


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    calendar.delete_appointment(db, context, appointment_id)
