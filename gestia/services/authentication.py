"""
Credential checks and login
"""

from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from sqlmodel import Session, select
import structlog

from gestia.core.auth import create_session_token
from gestia.core.errors import AccountDisabled, InvalidCredentials, Unauthorized
from gestia.core.rate_limit import RateLimiter
from gestia.core.security import dummy_verify, verify_password
from gestia.core.session import SessionContext
from gestia.models.user import User
from gestia.schemas.auth import LoginRequest
from gestia.schemas.validation import parse_input

logger = structlog.get_logger(__name__)


def authenticate(
    db: Session,
    email: str,
    password: str,
    limiter: RateLimiter,
) -> User:
    """Check credentials against the limiter, the stored hash and the active flag.

    Every attempt spends one point for the email before any lookup, so the
    limit applies equally to existing and unknown accounts. The disabled
    account signal is only given to a caller who knows the password.
    """
    payload = parse_input(LoginRequest, {"email": email, "password": password})
    limiter.consume(payload.email)

    user = db.exec(select(User).where(User.email == payload.email)).first()
    if user is None:
        dummy_verify()
        logger.info("login_failed", reason="unknown_email")
        raise InvalidCredentials()

    if not verify_password(payload.password, user.password_hash):
        logger.info("login_failed", reason="bad_password", user_id=str(user.id))
        raise InvalidCredentials()

    if not user.is_active:
        logger.info("login_failed", reason="disabled", user_id=str(user.id))
        raise AccountDisabled()

    limiter.reset(payload.email)

    user.last_login_at = datetime.utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("login_succeeded", user_id=str(user.id), company_id=str(user.company_id))
    return user


def login(
    db: Session,
    data: Mapping[str, Any],
    limiter: RateLimiter,
) -> Tuple[User, str]:
    """Authenticate and issue a session token"""
    user = authenticate(db, data.get("email", ""), data.get("password", ""), limiter)
    return user, create_session_token(user)


def resolve_session(db: Session, context: Optional[SessionContext]) -> SessionContext:
    """Re-read the principal behind a decoded token.

    The user must still exist in the token's company and be active. Role and
    verification status come from the database, so changes made after the
    token was issued apply to the next request.
    """
    if context is None or context.company_id is None:
        raise Unauthorized()

    user = db.exec(
        select(User).where(
            User.id == context.user_id,
            User.company_id == context.company_id,
        )
    ).first()
    if user is None or not user.is_active:
        raise Unauthorized("Session is no longer valid")

    return SessionContext.for_user(user)
