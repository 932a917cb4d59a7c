"""
Pydantic schemas for calendar appointments
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid

from gestia.models.appointment import AppointmentStatus
from gestia.schemas.validation import UtcDateTime

END_BEFORE_START = "End time must be after start time"


def _check_range(end_time: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
    start_time = info.data.get("start_time")
    if start_time is not None and end_time is not None and end_time <= start_time:
        raise ValueError(END_BEFORE_START)
    return end_time


class AppointmentCreate(BaseModel):
    """Appointment creation schema"""
    customer_id: uuid.UUID
    start_time: UtcDateTime
    end_time: UtcDateTime
    service_type: str = Field(..., min_length=2, max_length=255)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    user_id: Optional[uuid.UUID] = None
    status: Optional[AppointmentStatus] = None

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, value, info: ValidationInfo):
        return _check_range(value, info)


class AppointmentUpdate(AppointmentCreate):
    """Full edit from the appointment sheet; same fields as creation"""


class AppointmentReschedule(BaseModel):
    """Drag and drop on the calendar: only the dates move"""
    start_time: UtcDateTime
    end_time: UtcDateTime

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, value, info: ValidationInfo):
        return _check_range(value, info)


class AppointmentRange(BaseModel):
    """Visible calendar window"""
    start: UtcDateTime
    end: UtcDateTime

    @field_validator("end")
    @classmethod
    def end_after_start(cls, value, info: ValidationInfo):
        start = info.data.get("start")
        if start is not None and value < start:
            raise ValueError("Range end must not precede range start")
        return value


class AppointmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    start_time: datetime
    end_time: datetime
    service_type: str
    price: Optional[Decimal] = None
    status: AppointmentStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
