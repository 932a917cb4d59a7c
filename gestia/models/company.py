"""
Company model - the tenant that owns every other record
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid


class SubscriptionPlan(str, Enum):
    STARTER = "STARTER"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


class SubscriptionStatus(str, Enum):
    TRIAL = "TRIAL"
    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELLED = "CANCELLED"


class Company(SQLModel, table=True):
    """Tenant model for multi-tenant architecture"""

    __tablename__ = "companies"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, max_length=255)

    # Optional registration details
    vat_number: Optional[str] = Field(default=None, max_length=50)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    industry: Optional[str] = Field(default=None, max_length=100)

    # Plan
    subscription_plan: SubscriptionPlan = Field(default=SubscriptionPlan.STARTER)
    subscription_status: SubscriptionStatus = Field(default=SubscriptionStatus.TRIAL)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class TenantOwned(SQLModel):
    """Base for records scoped to a company; company_id is set once at creation"""

    company_id: uuid.UUID = Field(
        foreign_key="companies.id",
        index=True,
        description="Company ID for multi-tenant isolation",
    )
