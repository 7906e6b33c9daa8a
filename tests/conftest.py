"""
Test configuration and fixtures.

Provides:
- In-memory SQLite engine per test with the full schema
- Factories for users, departments, staff profiles and roles
- A seeded organisation (customer support, finance, HR) with resolved actors
- HTTPX AsyncClient bound to the test session
"""
import os
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from opsdesk.core.deps import get_db
from opsdesk.core.permissions import PermissionKey as P
from opsdesk.db.base import Base, utcnow
from opsdesk.db.enums import InquiryType, Role, StaffStatus
from opsdesk.db.models import (
    Department,
    StaffProfile,
    StaffRole,
    StaffRoleAssignment,
    StaffRolePermission,
    User,
)
from opsdesk.main import app
from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.inquiry import InquiryCreate
from opsdesk.services import actor_service, inquiry_service


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_user(db: Session):
    def _make(role: Role = Role.USER, *, email: str | None = None, name: str = "Test User", is_active: bool = True) -> User:
        user = User(
            id=uuid.uuid4(),
            email=email or f"user-{uuid.uuid4().hex[:8]}@test.com",
            display_name=name,
            role=role.value,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_department(db: Session):
    def _make(code: str, name: str | None = None, *, access_prefix: str | None = None, can_view_all_departments: bool = False, is_active: bool = True) -> Department:
        department = Department(
            code=code,
            name=name or code,
            access_prefix=access_prefix,
            can_view_all_departments=can_view_all_departments,
            is_active=is_active,
        )
        db.add(department)
        db.commit()
        return department

    return _make


@pytest.fixture
def grant_role(db: Session):
    """Attach a staff role holding ``permissions`` to a staff profile."""
    def _grant(profile: StaffProfile, permissions, *, effective_from=None, effective_to=None) -> StaffRoleAssignment:
        role = StaffRole(name=f"role-{uuid.uuid4().hex[:8]}")
        role.permissions = [
            StaffRolePermission(permission_key=getattr(key, "value", key)) for key in permissions
        ]
        db.add(role)
        db.flush()
        assignment = StaffRoleAssignment(
            staff_profile_id=profile.id,
            role_id=role.id,
            effective_from=effective_from or utcnow() - timedelta(days=1),
            effective_to=effective_to,
        )
        db.add(assignment)
        db.commit()
        return assignment

    return _grant


@pytest.fixture
def make_staff(db: Session, make_user, grant_role):
    def _make(department: Department, permissions=(), *, name: str = "Staff Member", role: Role = Role.USER, status: StaffStatus = StaffStatus.ACTIVE) -> StaffProfile:
        user = make_user(role, name=name)
        profile = StaffProfile(user_id=user.id, department_id=department.id, status=status)
        db.add(profile)
        db.commit()
        if permissions:
            grant_role(profile, permissions)
        return profile

    return _make


@pytest.fixture
def actor_for(db: Session):
    def _resolve(user_or_profile) -> ActorContext:
        user_id = getattr(user_or_profile, "user_id", None) or user_or_profile.id
        return actor_service.resolve_actor(db, user_id)

    return _resolve


# =============================================================================
# Seeded organisation
# =============================================================================

SUPPORT_PERMISSIONS = (
    P.SUPPORT_INQUIRIES_VIEW,
    P.SUPPORT_INQUIRIES_REPLY,
    P.SUPPORT_INQUIRIES_ASSIGN,
    P.SUPPORT_INQUIRIES_ESCALATE,
)
FINANCE_PERMISSIONS = (
    P.FINANCE_INQUIRIES_VIEW,
    P.FINANCE_INQUIRIES_REPLY,
    P.FINANCE_INQUIRIES_MANAGE,
)


@dataclass
class Org:
    """Departments, staff profiles and customer of a seeded organisation."""
    cs: Department
    fin: Department
    hr: Department
    customer: User
    other_customer: User
    cs_agent: StaffProfile
    cs_agent2: StaffProfile
    fin_agent: StaffProfile
    admin: User
    super_admin: User


@pytest.fixture
def org(make_user, make_department, make_staff) -> Org:
    cs = make_department("CS", "Customer Support", access_prefix="support")
    fin = make_department("FIN", "Finance", access_prefix="finance")
    hr = make_department("HR", "Human Resources", access_prefix="hr", can_view_all_departments=True)
    return Org(
        cs=cs,
        fin=fin,
        hr=hr,
        customer=make_user(name="Customer One"),
        other_customer=make_user(name="Customer Two"),
        cs_agent=make_staff(cs, SUPPORT_PERMISSIONS, name="Alice Support"),
        cs_agent2=make_staff(cs, SUPPORT_PERMISSIONS, name="Bob Support"),
        fin_agent=make_staff(fin, FINANCE_PERMISSIONS, name="Fiona Finance"),
        admin=make_user(Role.ADMIN, name="Admin"),
        super_admin=make_user(Role.SUPER_ADMIN, name="Root"),
    )


@pytest.fixture
def file_inquiry(db: Session, org: Org, actor_for):
    """File an inquiry as a customer through the service layer."""
    def _file(customer: User | None = None, *, subject: str = "Order never arrived", type: InquiryType = InquiryType.ORDER):
        actor = actor_for(customer or org.customer)
        return inquiry_service.create_inquiry(
            db, actor, InquiryCreate(type=type, subject=subject, message="Where is my order?")
        )

    return _file


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient whose requests share the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()
