"""
Tenant guard and role-based authorization matrix.

Every data operation starts with `authorize(session, Operation.X)`, which
returns the caller's company id or raises. The whole matrix lives in
POLICIES so it can be audited in one place.
"""

from enum import Enum
from typing import FrozenSet, NamedTuple, Optional
import uuid

from gestia.core.errors import EmailNotVerified, Forbidden, Unauthorized
from gestia.core.session import SessionContext
from gestia.models.user import Role


class Operation(str, Enum):
    """Operations guarded by the authorization matrix"""
    # Customers
    CUSTOMER_READ = "customer:read"
    CUSTOMER_WRITE = "customer:write"

    # Calendar
    APPOINTMENT_READ = "appointment:read"
    APPOINTMENT_WRITE = "appointment:write"

    # Employees
    EMPLOYEE_READ = "employee:read"
    EMPLOYEE_MANAGE = "employee:manage"

    # Inbox
    INBOX_READ = "inbox:read"
    INBOX_WRITE = "inbox:write"

    # Account
    VERIFICATION_RESEND = "verification:resend"


class Policy(NamedTuple):
    """Preconditions for an operation; roles=None means any role"""
    roles: Optional[FrozenSet[Role]] = None
    verified_email: bool = False


ANY_ROLE = Policy()
ADMIN_ONLY = Policy(roles=frozenset({Role.ADMIN}))
VERIFIED_ADMIN = Policy(roles=frozenset({Role.ADMIN}), verified_email=True)

POLICIES = {
    Operation.CUSTOMER_READ: ANY_ROLE,
    Operation.CUSTOMER_WRITE: ANY_ROLE,
    Operation.APPOINTMENT_READ: ANY_ROLE,
    Operation.APPOINTMENT_WRITE: ANY_ROLE,
    Operation.EMPLOYEE_READ: ADMIN_ONLY,
    Operation.EMPLOYEE_MANAGE: VERIFIED_ADMIN,
    Operation.INBOX_READ: ANY_ROLE,
    Operation.INBOX_WRITE: ANY_ROLE,
    Operation.VERIFICATION_RESEND: ANY_ROLE,
}


def require_tenant(session: Optional[SessionContext]) -> uuid.UUID:
    """Return the session's company id or fail with Unauthorized"""
    if session is None:
        raise Unauthorized("Session not found")
    if session.company_id is None:
        raise Unauthorized("Company ID missing from session")
    return session.company_id


def require_role(session: SessionContext, *roles: Role) -> None:
    if session.role not in roles:
        allowed = ", ".join(role.value for role in roles)
        raise Forbidden(f"Insufficient permissions (required role: {allowed})")


def require_verified_email(session: SessionContext) -> None:
    if not session.is_email_verified:
        raise EmailNotVerified()


def get_policy(operation: Operation) -> Policy:
    return POLICIES[operation]


def authorize(session: Optional[SessionContext], operation: Operation) -> uuid.UUID:
    """Apply the tenant guard plus the operation's declared preconditions"""
    company_id = require_tenant(session)
    policy = get_policy(operation)

    if policy.roles is not None:
        require_role(session, *sorted(policy.roles, key=lambda role: role.value))
    if policy.verified_email:
        require_verified_email(session)

    return company_id
