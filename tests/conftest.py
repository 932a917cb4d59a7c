"""
Test configuration for pytest
"""

import pytest
import os
import re
from datetime import datetime, timedelta
from typing import Generator, List, Optional, Tuple

# Test environment variables; must be set before gestia modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["EMAIL_BACKEND"] = "console"
os.environ["APP_URL"] = "http://testserver"

from sqlmodel import SQLModel, Session  # noqa: E402

from gestia.core.database import engine  # noqa: E402
from gestia.core.events import ViewsInvalidated, event_bus  # noqa: E402
from gestia.core.security import hash_password  # noqa: E402
from gestia.core.session import SessionContext  # noqa: E402
from gestia.models import Company, Customer, Role, User  # noqa: E402

TEST_PASSWORD = "password123"
TOKEN_PATTERN = re.compile(r"token=([0-9a-f]+)")


class FakeEmailSender:
    """Records outgoing mail; set `fail` to simulate a delivery error"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Tuple[str, str, str]] = []

    def send(self, to: str, subject: str, html: str) -> bool:
        if self.fail:
            return False
        self.sent.append((to, subject, html))
        return True

    def last_token(self) -> Optional[str]:
        if not self.sent:
            return None
        match = TOKEN_PATTERN.search(self.sent[-1][2])
        return match.group(1) if match else None


class FakeClock:
    """Monotonic clock that only moves when told to"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    # Create all tables
    SQLModel.metadata.create_all(engine)

    # Create session
    with Session(engine, expire_on_commit=False) as session:
        yield session

    # Cleanup
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def invalidated_views() -> Generator[List[ViewsInvalidated], None, None]:
    """Collect view invalidation events published during a test"""
    events: List[ViewsInvalidated] = []
    event_bus.subscribe(ViewsInvalidated.__name__, events.append)
    yield events
    event_bus.clear_subscribers()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_company(db: Session, name: str) -> Company:
    company = Company(name=name)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def make_user(
    db: Session,
    company: Company,
    email: str,
    role: Role = Role.SECRETARY,
    is_active: bool = True,
    email_verified: bool = True,
    name: str = "Test User",
) -> User:
    user = User(
        company_id=company.id,
        email=email,
        name=name,
        role=role,
        is_active=is_active,
        email_verified=email_verified,
        password_hash=hash_password(TEST_PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_customer(db: Session, company: Company, first_name: str = "Mario") -> Customer:
    customer = Customer(
        company_id=company.id,
        first_name=first_name,
        last_name="Rossi",
        phone_e164="+393331234567",
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


def session_for(user: User) -> SessionContext:
    return SessionContext.for_user(user)


def next_week(hour: int = 10) -> Tuple[datetime, datetime]:
    start = (datetime.utcnow() + timedelta(days=7)).replace(hour=hour, minute=0, second=0, microsecond=0)
    return start, start + timedelta(hours=1)


# Fixtures
@pytest.fixture
def company_a(db: Session) -> Company:
    return make_company(db, "Studio Alpha")


@pytest.fixture
def company_b(db: Session) -> Company:
    return make_company(db, "Studio Beta")


@pytest.fixture
def admin_a(db: Session, company_a: Company) -> User:
    return make_user(db, company_a, "admin@alpha.it", role=Role.ADMIN, name="Admin Alpha")


@pytest.fixture
def admin_b(db: Session, company_b: Company) -> User:
    return make_user(db, company_b, "admin@beta.it", role=Role.ADMIN, name="Admin Beta")


@pytest.fixture
def secretary_a(db: Session, company_a: Company) -> User:
    return make_user(db, company_a, "desk@alpha.it", role=Role.SECRETARY, name="Desk Alpha")


@pytest.fixture
def customer_a(db: Session, company_a: Company) -> Customer:
    return make_customer(db, company_a, first_name="Anna")


@pytest.fixture
def customer_b(db: Session, company_b: Company) -> Customer:
    return make_customer(db, company_b, first_name="Bruno")
