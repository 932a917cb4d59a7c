"""
Pydantic schemas for customers
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime
import uuid

from gestia.schemas.validation import OptionalEmail, OptionalText


class CustomerCreate(BaseModel):
    """Customer creation schema; unknown keys (e.g. company_id) are ignored"""
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., min_length=5, max_length=32)
    email: OptionalEmail = None
    internal_notes: OptionalText = None
    birth_date: Optional[date] = None
    gender: OptionalText = Field(default=None, max_length=32)
    fiscal_code: OptionalText = Field(default=None, max_length=32)
    vat_number: OptionalText = Field(default=None, max_length=50)


class CustomerUpdate(BaseModel):
    """Partial update; only fields present in the payload are written"""
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    phone: Optional[str] = Field(default=None, min_length=5, max_length=32)
    email: OptionalEmail = None
    internal_notes: OptionalText = None
    birth_date: Optional[date] = None
    gender: OptionalText = Field(default=None, max_length=32)
    fiscal_code: OptionalText = Field(default=None, max_length=32)
    vat_number: OptionalText = Field(default=None, max_length=50)


class CustomerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    phone_e164: str
    email: Optional[str] = None
    internal_notes: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    fiscal_code: Optional[str] = None
    vat_number: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
