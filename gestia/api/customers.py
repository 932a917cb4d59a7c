"""
Customers API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
import uuid

from gestia.core.database import get_session
from gestia.core.dependencies import get_session_context
from gestia.core.session import SessionContext
from gestia.schemas.appointment import AppointmentRead
from gestia.schemas.customer import CustomerRead
from gestia.services import calendar, customers

router = APIRouter()


@router.get("/", response_model=List[CustomerRead])
async def list_customers(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return customers.list_customers(db, context)


@router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    """Create a customer in the caller's company"""
    return customers.create_customer(db, context, customer_data)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(
    customer_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return customers.get_customer(db, context, customer_id)


@router.get("/{customer_id}/appointments", response_model=List[AppointmentRead])
async def list_customer_appointments(
    customer_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    """Appointment history shown on the customer sheet"""
    return calendar.list_customer_appointments(db, context, customer_id)


@router.patch("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer_id: uuid.UUID,
    customer_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return customers.update_customer(db, context, customer_id, customer_data)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    customers.delete_customer(db, context, customer_id)
