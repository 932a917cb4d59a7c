"""
Typed error taxonomy shared by services and the HTTP layer.

Services raise these; the API layer renders them through a single
exception handler. Messages for credential and disabled-account failures
stay generic so they cannot be used to enumerate accounts.
"""

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
import structlog

logger = structlog.get_logger(__name__)


class GestiaError(Exception):
    """Base error with a stable code and an HTTP mapping"""

    code: str = "ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class Unauthorized(GestiaError):
    """No session, no tenant in the session, or insufficient role"""
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized. Please sign in."


class Forbidden(Unauthorized):
    """Valid session whose role does not allow the operation"""
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions for this operation"


class EmailNotVerified(GestiaError):
    code = "EMAIL_NOT_VERIFIED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Verify your email address to perform this operation"


class NotFound(GestiaError):
    """Record absent or owned by another tenant; the two are indistinguishable"""
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Record not found"


class Conflict(GestiaError):
    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT
    default_message = "The request conflicts with existing data"


class InvalidInput(GestiaError):
    code = "INVALID_INPUT"
    status_code = 422
    default_message = "Invalid data. Check the fields and try again."

    def __init__(self, field_errors: Dict[str, str], message: Optional[str] = None):
        super().__init__(message, details={"field_errors": field_errors})
        self.field_errors = field_errors


class RateLimited(GestiaError):
    code = "RATE_LIMITED"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many attempts. Try again later."

    def __init__(self, retry_after: int, message: Optional[str] = None):
        super().__init__(message, details={"retry_after": retry_after})
        self.retry_after = retry_after


class AccountDisabled(GestiaError):
    code = "ACCOUNT_DISABLED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "This account has been disabled. Contact your administrator."


class InvalidCredentials(GestiaError):
    code = "INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class InvalidToken(GestiaError):
    code = "INVALID_TOKEN"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The verification link is invalid"


class ExpiredToken(GestiaError):
    code = "EXPIRED_TOKEN"
    status_code = status.HTTP_410_GONE
    default_message = "The verification link has expired"


class AlreadyVerified(GestiaError):
    code = "ALREADY_VERIFIED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "This email address is already verified"


class TransientFailure(GestiaError):
    """Delivery or infrastructure failure that does not indicate a logic fault"""
    code = "TRANSIENT_FAILURE"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "A temporary error occurred. Try again later."


async def gestia_error_handler(request: Request, exc: GestiaError) -> JSONResponse:
    """Render any GestiaError as a structured JSON response"""
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(exc.retry_after)}

    if exc.status_code >= 500:
        logger.warning("request_failed", code=exc.code, path=request.url.path)

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )
