"""
Company registration and email verification.

A registration creates the company and its first ADMIN in one transaction.
The admin starts unverified with a one-time token whose sha256 is stored;
the raw token only ever travels in the verification email.

    Unregistered --register--> Pending --verify--> Verified
"""

from datetime import datetime, timedelta
import math
from typing import Any, Mapping, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
import structlog

from gestia.core.config import get_settings
from gestia.core.database import transaction
from gestia.core.email import EmailSender, send_verification_email
from gestia.core.errors import (
    AlreadyVerified, Conflict, ExpiredToken, InvalidToken, NotFound, RateLimited,
    TransientFailure, Unauthorized,
)
from gestia.core.permissions import Operation, authorize
from gestia.core.security import generate_one_time_token, hash_password, hash_token
from gestia.core.session import SessionContext
from gestia.core.tenancy import scoped_get, scoped_update
from gestia.models.company import Company, SubscriptionPlan, SubscriptionStatus
from gestia.models.user import Role, User
from gestia.schemas.auth import RegisterRequest
from gestia.schemas.validation import parse_input

logger = structlog.get_logger(__name__)

EMAIL_TAKEN = "EMAIL_TAKEN"
EMAIL_TAKEN_MESSAGE = "This email is already registered"
MIN_TOKEN_LENGTH = 10


def _email_taken(db: Session, email: str) -> bool:
    return db.exec(select(User.id).where(User.email == email)).first() is not None


def _email_taken_error() -> Conflict:
    return Conflict(
        EMAIL_TAKEN_MESSAGE,
        code=EMAIL_TAKEN,
        details={"field_errors": {"email": EMAIL_TAKEN_MESSAGE}},
    )


def register_company(
    db: Session,
    data: Mapping[str, Any],
    email_sender: EmailSender,
) -> User:
    """Create a company with its ADMIN and send the verification email.

    The unique constraint on users.email is the final arbiter: when two
    registrations race past the existence check, the loser's whole transaction
    is rolled back and it gets the same EMAIL_TAKEN conflict.
    """
    settings = get_settings()
    payload = parse_input(RegisterRequest, data)

    raw_token, token_hash = generate_one_time_token()
    now = datetime.utcnow()

    try:
        with transaction(db):
            if _email_taken(db, payload.email):
                raise _email_taken_error()

            company = Company(
                name=payload.company_name,
                vat_number=payload.vat_number,
                phone_number=payload.phone_number,
                industry=payload.industry,
                subscription_plan=SubscriptionPlan.STARTER,
                subscription_status=SubscriptionStatus.TRIAL,
            )
            db.add(company)

            admin = User(
                company_id=company.id,
                email=payload.email,
                password_hash=hash_password(payload.password),
                name=payload.admin_name,
                role=Role.ADMIN,
                is_active=True,
                email_verified=False,
                email_verify_token=token_hash,
                email_verify_expires=now + timedelta(hours=settings.EMAIL_VERIFY_TOKEN_TTL_HOURS),
                last_verification_email_sent_at=now,
            )
            db.add(admin)
    except IntegrityError as exc:
        logger.info("registration_email_conflict", email=payload.email)
        raise _email_taken_error() from exc

    db.refresh(admin)
    logger.info(
        "company_registered",
        company_id=str(admin.company_id),
        user_id=str(admin.id),
    )

    # Delivery happens outside the transaction; the user can ask for a resend
    if not send_verification_email(email_sender, admin.email, raw_token):
        logger.warning("verification_email_not_sent", user_id=str(admin.id))

    return admin


def verify_email(db: Session, raw_token: Optional[str]) -> User:
    """Consume a verification token; it can succeed at most once"""
    if not raw_token or len(raw_token) < MIN_TOKEN_LENGTH:
        raise InvalidToken()

    token_hash = hash_token(raw_token)
    user = db.exec(select(User).where(User.email_verify_token == token_hash)).first()
    if user is None:
        raise InvalidToken()
    if user.email_verified:
        raise AlreadyVerified()
    if user.email_verify_expires is None or user.email_verify_expires < datetime.utcnow():
        raise ExpiredToken()

    # Conditional on the token hash, so a concurrent second use matches nothing
    result = db.exec(
        update(User)
        .where(
            User.id == user.id,
            User.email_verify_token == token_hash,
            User.email_verified.is_(False),
        )
        .values(
            email_verified=True,
            email_verify_token=None,
            email_verify_expires=None,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        db.rollback()
        raise InvalidToken()
    db.commit()
    db.refresh(user)

    logger.info("email_verified", user_id=str(user.id), company_id=str(user.company_id))
    return user


def _resend_cooldown(retry_after: int) -> RateLimited:
    return RateLimited(
        retry_after=retry_after,
        message=f"Wait {retry_after} seconds before requesting another email",
    )


def resend_verification_email(
    db: Session,
    session: Optional[SessionContext],
    email_sender: EmailSender,
) -> User:
    """Rotate the verification token and send a fresh link, at most once per cooldown"""
    settings = get_settings()
    company_id = authorize(session, Operation.VERIFICATION_RESEND)

    try:
        user = scoped_get(db, User, company_id, session.user_id, label="User")
    except NotFound as exc:
        raise Unauthorized("User not found") from exc

    if user.email_verified:
        raise AlreadyVerified()

    now = datetime.utcnow()
    cooldown = settings.EMAIL_VERIFY_RESEND_COOLDOWN_SECONDS
    last_sent_at = user.last_verification_email_sent_at
    if last_sent_at is not None:
        elapsed = (now - last_sent_at).total_seconds()
        if elapsed < cooldown:
            raise _resend_cooldown(max(1, math.ceil(cooldown - elapsed)))

    # Only rotate if no other resend has stamped the user since it was read
    if last_sent_at is None:
        unchanged = User.last_verification_email_sent_at.is_(None)
    else:
        unchanged = User.last_verification_email_sent_at == last_sent_at

    raw_token, token_hash = generate_one_time_token()
    try:
        with transaction(db):
            scoped_update(db, User, company_id, user.id, {
                "email_verify_token": token_hash,
                "email_verify_expires": now + timedelta(hours=settings.EMAIL_VERIFY_TOKEN_TTL_HOURS),
                "last_verification_email_sent_at": now,
                "updated_at": now,
            }, label="User", conditions=(unchanged,))
    except NotFound as exc:
        logger.info("verification_resend_superseded", user_id=str(user.id))
        raise _resend_cooldown(cooldown) from exc
    db.refresh(user)

    if not send_verification_email(email_sender, user.email, raw_token):
        # The rotation stays committed; the old link is already invalid
        raise TransientFailure("Could not send the verification email. Try again later.")

    logger.info("verification_email_resent", user_id=str(user.id), company_id=str(company_id))
    return user
