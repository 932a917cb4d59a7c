"""
Authenticated session context passed explicitly into every data operation
"""

from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict

from gestia.models.user import Role, User


class SessionContext(BaseModel):
    """Snapshot of the principal taken when the session token was issued"""

    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    company_id: Optional[uuid.UUID] = None
    role: Optional[Role] = None
    is_email_verified: bool = False

    @classmethod
    def for_user(cls, user: User) -> "SessionContext":
        return cls(
            user_id=user.id,
            company_id=user.company_id,
            role=user.role,
            is_email_verified=user.email_verified,
        )
