"""
Unit tests for team administration
"""

import pytest
import uuid

from sqlmodel import select

from gestia.core.errors import Conflict, EmailNotVerified, NotFound, Unauthorized
from gestia.core.events import EMPLOYEES_VIEW
from gestia.core.security import verify_password
from gestia.models.user import Role, User
from gestia.services import employees

from conftest import TEST_PASSWORD, make_user, session_for

NEW_EMPLOYEE = {
    "name": "Laura Neri",
    "email": "Laura@Alpha.it",
    "role": "SECRETARY",
    "password": "secretpass",
}


def test_admin_creates_employee(db, admin_a, invalidated_views):
    employee = employees.create_employee(db, session_for(admin_a), NEW_EMPLOYEE)

    assert employee.company_id == admin_a.company_id
    assert employee.email == "laura@alpha.it"
    assert employee.role == Role.SECRETARY
    assert employee.is_active is True
    assert verify_password("secretpass", employee.password_hash)
    assert invalidated_views[-1].paths == (EMPLOYEES_VIEW,)


def test_secretary_cannot_create_employee(db, secretary_a):
    with pytest.raises(Unauthorized):
        employees.create_employee(db, session_for(secretary_a), NEW_EMPLOYEE)

    assert db.exec(select(User).where(User.email == "laura@alpha.it")).first() is None


def test_unverified_admin_cannot_create_employee(db, company_a):
    admin = make_user(db, company_a, "new@alpha.it", role=Role.ADMIN, email_verified=False)

    with pytest.raises(EmailNotVerified):
        employees.create_employee(db, session_for(admin), NEW_EMPLOYEE)


def test_secretary_cannot_list_employees(db, secretary_a):
    with pytest.raises(Unauthorized):
        employees.list_employees(db, session_for(secretary_a))


def test_duplicate_email_in_any_company_conflicts(db, admin_a, admin_b):
    data = dict(NEW_EMPLOYEE, email=admin_b.email)

    with pytest.raises(Conflict) as exc_info:
        employees.create_employee(db, session_for(admin_a), data)
    assert "email" in exc_info.value.details["field_errors"]


def test_list_employees_scoped_to_company(db, admin_a, secretary_a, admin_b):
    listed = employees.list_employees(db, session_for(admin_a))

    assert {employee.id for employee in listed} == {admin_a.id, secretary_a.id}


def test_update_employee_keeps_password_when_blank(db, admin_a, secretary_a):
    updated = employees.update_employee(db, session_for(admin_a), secretary_a.id, {
        "name": "Desk Renamed",
        "role": "ADMIN",
        "password": "",
    })

    assert updated.name == "Desk Renamed"
    assert updated.role == Role.ADMIN
    assert verify_password(TEST_PASSWORD, updated.password_hash)


def test_update_employee_changes_password(db, admin_a, secretary_a):
    updated = employees.update_employee(db, session_for(admin_a), secretary_a.id, {
        "password": "brand-new-pass",
    })

    assert verify_password("brand-new-pass", updated.password_hash)


def test_update_employee_ignores_email_and_company(db, admin_a, secretary_a, company_b):
    updated = employees.update_employee(db, session_for(admin_a), secretary_a.id, {
        "email": "moved@beta.it",
        "company_id": str(company_b.id),
    })

    assert updated.email == "desk@alpha.it"
    assert updated.company_id == admin_a.company_id


def test_toggle_employee_status(db, admin_a, secretary_a):
    session = session_for(admin_a)

    disabled = employees.toggle_employee_status(db, session, secretary_a.id)
    assert disabled.is_active is False

    restored = employees.toggle_employee_status(db, session, secretary_a.id)
    assert restored.is_active is True


def test_toggle_other_company_employee_is_not_found(db, admin_a, admin_b):
    with pytest.raises(NotFound):
        employees.toggle_employee_status(db, session_for(admin_a), admin_b.id)

    db.expire_all()
    assert db.get(User, admin_b.id).is_active is True


def test_toggle_missing_employee_is_not_found(db, admin_a):
    with pytest.raises(NotFound):
        employees.toggle_employee_status(db, session_for(admin_a), uuid.uuid4())
