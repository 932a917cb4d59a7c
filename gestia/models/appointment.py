"""
Appointment model for the calendar
"""

from sqlmodel import Field
from sqlalchemy import Column, Numeric
from datetime import datetime
from decimal import Decimal
from typing import Optional
from enum import Enum
import uuid

from gestia.models.company import TenantOwned


class AppointmentStatus(str, Enum):
    """Status of an appointment"""
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class Appointment(TenantOwned, table=True):
    """Appointment between a customer and an optional operator"""

    __tablename__ = "appointments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    customer_id: uuid.UUID = Field(foreign_key="customers.id", ondelete="CASCADE", index=True)
    user_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="users.id",
        ondelete="SET NULL",
        index=True,
        description="Operator assigned to the appointment",
    )

    start_time: datetime = Field(index=True)
    end_time: datetime = Field(index=True)
    service_type: str = Field(max_length=255)
    price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 2), nullable=True))
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
