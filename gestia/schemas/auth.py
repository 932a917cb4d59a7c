"""
Pydantic schemas for registration, login and session tokens
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

from gestia.models.user import Role
from gestia.schemas.validation import LoginEmail, NormalizedEmail, OptionalText


class RegisterRequest(BaseModel):
    """Public signup: creates a company together with its first ADMIN"""
    company_name: str = Field(..., min_length=2, max_length=255)
    admin_name: str = Field(..., min_length=2, max_length=255)
    email: NormalizedEmail
    password: str = Field(..., min_length=8, max_length=128)
    vat_number: OptionalText = Field(default=None, max_length=50)
    phone_number: OptionalText = Field(default=None, max_length=50)
    industry: OptionalText = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    """User login schema"""
    email: LoginEmail = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """Token response"""
    access_token: str
    token_type: str = "bearer"
    user_id: uuid.UUID
    company_id: uuid.UUID
    role: Role
    email_verified: bool


class MeResponse(BaseModel):
    """Current principal"""
    id: uuid.UUID
    company_id: uuid.UUID
    company_name: str
    name: str
    email: str
    role: Role
    is_active: bool
    email_verified: bool
    created_at: datetime
    last_login_at: Optional[datetime]
