"""
Authentication dependencies for FastAPI
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from functools import lru_cache
from typing import Optional
from sqlmodel import Session
import structlog

from gestia.core.auth import decode_session_token
from gestia.core.config import get_settings
from gestia.core.database import get_session
from gestia.core.email import EmailSender, build_email_sender
from gestia.core.errors import Unauthorized
from gestia.core.rate_limit import RateLimiter, build_login_rate_limiter
from gestia.core.session import SessionContext
from gestia.services.authentication import resolve_session

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)


async def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_session),
) -> SessionContext:
    """Decode the bearer token and re-validate the principal against the database"""
    if credentials is None:
        raise Unauthorized()

    context = decode_session_token(credentials.credentials)
    if context is None:
        raise Unauthorized("Session expired or invalid. Please sign in again.")

    context = resolve_session(db, context)
    logger.debug("session_resolved", user_id=str(context.user_id))
    return context


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    """Login limiter shared by every request of this process"""
    return build_login_rate_limiter(get_settings())


@lru_cache()
def get_email_sender() -> EmailSender:
    return build_email_sender(get_settings())
