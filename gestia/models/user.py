"""
User model with roles and tenant scoping
"""

from sqlmodel import Field
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from gestia.models.company import TenantOwned


class Role(str, Enum):
    """Closed set of user roles"""
    ADMIN = "ADMIN"
    SECRETARY = "SECRETARY"


class User(TenantOwned, table=True):
    """Principal belonging to exactly one company"""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Authentication; email is unique across all companies
    email: str = Field(unique=True, index=True, nullable=False, max_length=255)
    password_hash: str = Field(nullable=False)

    # Profile
    name: str = Field(nullable=False, max_length=255)

    # RBAC
    role: Role = Field(default=Role.SECRETARY, nullable=False)

    # Status; inactive users are kept for historical references
    is_active: bool = Field(default=True, index=True)

    # Email verification (only the sha256 of the one-time token is stored)
    email_verified: bool = Field(default=False)
    email_verify_token: Optional[str] = Field(default=None, unique=True, index=True, max_length=64)
    email_verify_expires: Optional[datetime] = None
    last_verification_email_sent_at: Optional[datetime] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
