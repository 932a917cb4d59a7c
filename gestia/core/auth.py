"""
JWT session tokens
"""

from datetime import datetime, timedelta
from jose import JWTError, jwt
from typing import Dict, Optional
import uuid

from pydantic import ValidationError

from gestia.core.config import get_settings
from gestia.core.session import SessionContext
from gestia.models.user import User

settings = get_settings()


def create_session_token(
    user: User,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed session token carrying the principal's claims"""
    issued_at = datetime.utcnow()
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)

    to_encode = {
        "sub": str(user.id),
        "company_id": str(user.company_id),
        "role": user.role.value,
        "email_verified": user.email_verified,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict]:
    """Decode and validate JWT token; expired or tampered tokens yield None"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def decode_session_token(token: str) -> Optional[SessionContext]:
    """Verify token and return the session it carries"""
    payload = decode_access_token(token)
    if payload is None or not payload.get("sub"):
        return None

    try:
        return SessionContext(
            user_id=uuid.UUID(payload["sub"]),
            company_id=uuid.UUID(payload["company_id"]) if payload.get("company_id") else None,
            role=payload.get("role"),
            is_email_verified=bool(payload.get("email_verified", False)),
        )
    except (ValueError, ValidationError):
        return None
