"""
Pydantic schemas for employees
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
import uuid

from gestia.models.user import Role
from gestia.schemas.validation import NormalizedEmail, OptionalText


class EmployeeCreate(BaseModel):
    """Employee creation schema"""
    name: str = Field(..., min_length=2, max_length=255)
    email: NormalizedEmail
    role: Role
    password: str = Field(..., min_length=8, max_length=128)


class EmployeeUpdate(BaseModel):
    """Name, role and password only; email and company never change here"""
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    role: Optional[Role] = None
    password: OptionalText = Field(default=None, min_length=8, max_length=128)


class EmployeeRead(BaseModel):
    """Employee as exposed to admins; never includes the password hash"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime
