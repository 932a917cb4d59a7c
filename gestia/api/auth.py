"""
Registration, login and email verification endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import Optional
import structlog

from gestia.core.auth import create_session_token
from gestia.core.database import get_session
from gestia.core.dependencies import get_email_sender, get_rate_limiter, get_session_context
from gestia.core.email import EmailSender
from gestia.core.errors import Unauthorized
from gestia.core.rate_limit import RateLimiter
from gestia.core.session import SessionContext
from gestia.core.tenancy import scoped_get
from gestia.models.company import Company
from gestia.models.user import User
from gestia.schemas.auth import MeResponse, TokenResponse
from gestia.services import authentication, registration

logger = structlog.get_logger(__name__)
router = APIRouter()


def _token_response(user: User, token: str) -> TokenResponse:
    return TokenResponse(
        access_token=token,
        user_id=user.id,
        company_id=user.company_id,
        role=user.role,
        email_verified=user.email_verified,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    register_data: dict,
    db: Session = Depends(get_session),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """Create a company with its first admin and sign them in"""
    admin = registration.register_company(db, register_data, email_sender)
    return _token_response(admin, create_session_token(admin))


@router.post("/login", response_model=TokenResponse)
def login(
    login_data: dict,
    db: Session = Depends(get_session),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    user, token = authentication.login(db, login_data, limiter)
    return _token_response(user, token)


@router.get("/verify-email", response_model=TokenResponse)
def verify_email(
    token: Optional[str] = None,
    db: Session = Depends(get_session),
):
    """Consume the emailed link; returns a fresh token carrying the verified flag"""
    user = registration.verify_email(db, token)
    return _token_response(user, create_session_token(user))


@router.post("/verify-email/resend")
def resend_verification_email(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
    email_sender: EmailSender = Depends(get_email_sender),
):
    user = registration.resend_verification_email(db, context, email_sender)
    return {
        "sent": True,
        "email": user.email,
        "expires_at": user.email_verify_expires,
    }


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    """Get current user info"""
    user = scoped_get(db, User, context.company_id, context.user_id, label="User")
    company = db.get(Company, context.company_id)
    if company is None:
        raise Unauthorized("Company not found")

    return MeResponse(
        id=user.id,
        company_id=user.company_id,
        company_name=company.name,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        email_verified=user.email_verified,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )
