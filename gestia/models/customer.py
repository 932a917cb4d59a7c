"""
Customer model
"""

from sqlmodel import Field
from datetime import date, datetime
from typing import Optional
import uuid

from gestia.models.company import TenantOwned


class Customer(TenantOwned, table=True):
    """Customer record owned by a company"""

    __tablename__ = "customers"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    phone_e164: str = Field(index=True, max_length=32)
    email: Optional[str] = Field(default=None, max_length=255)
    internal_notes: Optional[str] = None

    birth_date: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=32)
    fiscal_code: Optional[str] = Field(default=None, max_length=32)
    vat_number: Optional[str] = Field(default=None, max_length=50)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: Optional[datetime] = None
