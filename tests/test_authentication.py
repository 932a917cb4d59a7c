"""
Unit tests for login, rate limiting and session re-validation
"""

import pytest

from gestia.core.auth import decode_session_token
from gestia.core.errors import (
    AccountDisabled, InvalidCredentials, InvalidInput, RateLimited, Unauthorized,
)
from gestia.core.rate_limit import InMemoryRateLimiter
from gestia.models.user import Role
from gestia.services import authentication, employees

from conftest import TEST_PASSWORD, make_user, session_for


@pytest.fixture
def limiter(clock):
    return InMemoryRateLimiter(points=5, duration=900, clock=clock)


def test_login_returns_user_and_token(db, admin_a, limiter):
    user, token = authentication.login(db, {"email": "ADMIN@alpha.it ", "password": TEST_PASSWORD}, limiter)

    assert user.id == admin_a.id
    assert user.last_login_at is not None
    assert decode_session_token(token) == session_for(admin_a)


def test_unknown_email_and_wrong_password_look_the_same(db, admin_a, limiter):
    with pytest.raises(InvalidCredentials) as unknown:
        authentication.authenticate(db, "nobody@alpha.it", TEST_PASSWORD, limiter)
    with pytest.raises(InvalidCredentials) as wrong:
        authentication.authenticate(db, admin_a.email, "wrong-password", limiter)

    assert unknown.value.to_dict() == wrong.value.to_dict()


def test_disabled_account(db, company_a, limiter):
    user = make_user(db, company_a, "gone@alpha.it", is_active=False)

    with pytest.raises(AccountDisabled):
        authentication.authenticate(db, user.email, TEST_PASSWORD, limiter)


def test_disabled_account_with_wrong_password_is_invalid_credentials(db, company_a, limiter):
    user = make_user(db, company_a, "gone@alpha.it", is_active=False)

    with pytest.raises(InvalidCredentials):
        authentication.authenticate(db, user.email, "wrong-password", limiter)


def test_sixth_attempt_is_rate_limited(db, admin_a, secretary_a, limiter):
    for _ in range(5):
        with pytest.raises(InvalidCredentials):
            authentication.authenticate(db, admin_a.email, "wrong-password", limiter)

    # Even the right password is refused once the budget is spent
    with pytest.raises(RateLimited) as exc_info:
        authentication.authenticate(db, admin_a.email, TEST_PASSWORD, limiter)
    assert exc_info.value.retry_after > 0

    # Other emails keep their own budget
    assert authentication.authenticate(db, secretary_a.email, TEST_PASSWORD, limiter).id == secretary_a.id


def test_rate_limit_window_expires(db, admin_a, limiter, clock):
    for _ in range(5):
        with pytest.raises(InvalidCredentials):
            authentication.authenticate(db, admin_a.email, "wrong-password", limiter)

    clock.advance(901)

    assert authentication.authenticate(db, admin_a.email, TEST_PASSWORD, limiter).id == admin_a.id


def test_successful_login_resets_attempts(db, admin_a, limiter):
    for _ in range(4):
        with pytest.raises(InvalidCredentials):
            authentication.authenticate(db, admin_a.email, "wrong-password", limiter)

    authentication.authenticate(db, admin_a.email, TEST_PASSWORD, limiter)

    for _ in range(5):
        with pytest.raises(InvalidCredentials):
            authentication.authenticate(db, admin_a.email, "wrong-password", limiter)


def test_empty_credentials_are_invalid_input(db, limiter):
    with pytest.raises(InvalidInput):
        authentication.login(db, {"email": "", "password": ""}, limiter)


def test_resolve_session_refreshes_role(db, admin_a, secretary_a):
    stale = session_for(secretary_a)
    employees.update_employee(db, session_for(admin_a), secretary_a.id, {"role": "ADMIN"})

    fresh = authentication.resolve_session(db, stale)

    assert fresh.role == Role.ADMIN
    assert fresh.company_id == secretary_a.company_id


def test_resolve_session_rejects_disabled_user(db, admin_a, secretary_a):
    stale = session_for(secretary_a)
    employees.toggle_employee_status(db, session_for(admin_a), secretary_a.id)

    with pytest.raises(Unauthorized):
        authentication.resolve_session(db, stale)


def test_resolve_session_rejects_company_mismatch(db, secretary_a, company_b):
    forged = session_for(secretary_a).model_copy(update={"company_id": company_b.id})

    with pytest.raises(Unauthorized):
        authentication.resolve_session(db, forged)
