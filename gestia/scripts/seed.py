"""
Seed two isolated demo companies, each with its own admin

Run with: python -m gestia.scripts.seed

Re-running is safe: existing companies and users are left untouched.
"""

import sys
import uuid
from typing import Dict, List

from sqlmodel import Session, select
import structlog

from gestia.core.database import engine, init_db
from gestia.core.logging import configure_logging
from gestia.core.security import hash_password
from gestia.models.company import Company, SubscriptionPlan, SubscriptionStatus
from gestia.models.user import Role, User

logger = structlog.get_logger(__name__)

DEMO_PASSWORD = "password123"

DEMO_TENANTS: List[Dict[str, str]] = [
    {
        "company_id": "00000000-0000-4000-8000-000000000001",
        "company_name": "Azienda Demo",
        "admin_name": "Admin Demo",
        "admin_email": "admin@demo.com",
    },
    {
        "company_id": "00000000-0000-4000-8000-000000000002",
        "company_name": "Seconda Azienda Demo",
        "admin_name": "Admin 2 Demo",
        "admin_email": "admin2@demo.com",
    },
]


def seed_tenant(session: Session, tenant: Dict[str, str]) -> User:
    """Upsert-style creation of one company and its admin"""
    company_id = uuid.UUID(tenant["company_id"])

    company = session.get(Company, company_id)
    if company is None:
        company = Company(
            id=company_id,
            name=tenant["company_name"],
            subscription_plan=SubscriptionPlan.STARTER,
            subscription_status=SubscriptionStatus.TRIAL,
        )
        session.add(company)
        logger.info("Company created", company_id=str(company_id), name=company.name)

    admin = session.exec(select(User).where(User.email == tenant["admin_email"])).first()
    if admin is None:
        admin = User(
            company_id=company_id,
            name=tenant["admin_name"],
            email=tenant["admin_email"],
            password_hash=hash_password(DEMO_PASSWORD),
            role=Role.ADMIN,
            is_active=True,
            email_verified=True,
        )
        session.add(admin)
        logger.info("Admin created", email=admin.email, company_id=str(company_id))
    else:
        logger.info("Admin already present", email=admin.email)

    return admin


def seed(session: Session) -> List[User]:
    admins = [seed_tenant(session, tenant) for tenant in DEMO_TENANTS]
    session.commit()
    return admins


def main():
    """Main entry point for the seed script"""
    configure_logging()
    try:
        init_db()
        with Session(engine) as session:
            seed(session)
    except Exception:
        logger.exception("Seed failed")
        sys.exit(1)

    for tenant in DEMO_TENANTS:
        logger.info("Demo credentials", email=tenant["admin_email"], password=DEMO_PASSWORD)


if __name__ == "__main__":
    main()
