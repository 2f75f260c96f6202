"""Shared test fixtures — async DB, client, identity helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test settings before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("HR_ADMIN_EMAILS", "hr.admin@example.com")
os.environ.setdefault("ENVIRONMENT", "development")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hr_dashboard.auth.dependencies import get_approval_policy
from hr_dashboard.common.constants import HalfDay, LeaveStatus
from hr_dashboard.config import settings
from hr_dashboard.database import Base, get_db
from hr_dashboard.leave.policy import ActorContext, ApprovalPolicy
from hr_dashboard.leave.quantity import calculate_days_requested
from hr_dashboard.main import create_app

# Import ALL model modules so SQLAlchemy can resolve cross-module relationships
import hr_dashboard.common.audit  # noqa: F401
import hr_dashboard.employees.models  # noqa: F401
import hr_dashboard.files.models  # noqa: F401
import hr_dashboard.leave.models  # noqa: F401

from hr_dashboard.employees.models import Employee
from hr_dashboard.leave.models import BlockedDay, LeaveEntitlement, LeaveRequest

ADMIN_EMAIL = "hr.admin@example.com"
MANAGER_EMAIL = "mia.manager@example.com"
EMPLOYEE_EMAIL = "eve.employee@example.com"
COLLEAGUE_EMAIL = "carl.colleague@example.com"
OUTSIDER_EMAIL = "oscar.outsider@example.com"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from hr_dashboard.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Approval policy ─────────────────────────────────────────────────

@pytest.fixture
def policy() -> ApprovalPolicy:
    return ApprovalPolicy([ADMIN_EMAIL])


@pytest.fixture
def admin_actor(policy) -> ActorContext:
    return policy.actor_for(ADMIN_EMAIL)


@pytest.fixture
def manager_actor(policy) -> ActorContext:
    return policy.actor_for(MANAGER_EMAIL)


@pytest.fixture
def employee_actor(policy) -> ActorContext:
    return policy.actor_for(EMPLOYEE_EMAIL)


@pytest.fixture
def outsider_actor(policy) -> ActorContext:
    return policy.actor_for(OUTSIDER_EMAIL)


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(policy):
    """Create a fresh app instance with DB and policy dependencies overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    application.dependency_overrides[get_approval_policy] = lambda: policy
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

async def make_employee(
    db: AsyncSession,
    *,
    email: str = EMPLOYEE_EMAIL,
    full_name: str = "Eve Employee",
    manager_email: Optional[str] = MANAGER_EMAIL,
    onedrive_folder_url: Optional[str] = None,
) -> Employee:
    emp = Employee(
        email=email,
        full_name=full_name,
        manager_email=manager_email,
        onedrive_folder_url=onedrive_folder_url,
    )
    db.add(emp)
    await db.commit()
    return emp


async def make_leave(
    db: AsyncSession,
    employee: Employee,
    start_date: date,
    end_date: date,
    *,
    status: LeaveStatus = LeaveStatus.pending,
    start_half_day: HalfDay = HalfDay.full,
    end_half_day: HalfDay = HalfDay.full,
    reason: Optional[str] = None,
    manager_notes: Optional[str] = None,
) -> LeaveRequest:
    req = LeaveRequest(
        employee_id=employee.id,
        start_date=start_date,
        end_date=end_date,
        start_half_day=start_half_day,
        end_half_day=end_half_day,
        days_requested=calculate_days_requested(
            start_date, end_date, start_half_day, end_half_day,
        ),
        reason=reason,
        status=status,
        manager_notes=manager_notes,
    )
    db.add(req)
    await db.commit()
    return req


async def make_blocked_day(
    db: AsyncSession,
    blocked_date: date,
    reason: str = "Quarter close",
) -> BlockedDay:
    day = BlockedDay(blocked_date=blocked_date, reason=reason, created_by=ADMIN_EMAIL)
    db.add(day)
    await db.commit()
    return day


async def make_entitlement(
    db: AsyncSession,
    employee: Employee,
    year: int,
    allowance: str = "25",
    carryover: str = "0",
) -> LeaveEntitlement:
    ent = LeaveEntitlement(
        employee_id=employee.id,
        year=year,
        annual_allowance_days=Decimal(allowance),
        carryover_days=Decimal(carryover),
    )
    db.add(ent)
    await db.commit()
    return ent


@pytest.fixture
async def manager(db) -> Employee:
    return await make_employee(
        db, email=MANAGER_EMAIL, full_name="Mia Manager", manager_email=None,
    )


@pytest.fixture
async def employee(db, manager) -> Employee:
    """Eve, reporting to Mia."""
    return await make_employee(db)


@pytest.fixture
async def colleague(db, manager) -> Employee:
    """Carl, also reporting to Mia."""
    return await make_employee(db, email=COLLEAGUE_EMAIL, full_name="Carl Colleague")


# ── Identity helpers ────────────────────────────────────────────────

def as_user(email: str) -> dict[str, str]:
    """Headers identifying the caller the way the access proxy does."""
    return {"Cf-Access-Authenticated-User-Email": email}


def create_access_token(
    email: str,
    expired: bool = False,
    token_type: str = "access",
) -> str:
    """Generate a JWT access token for testing."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS)
    payload = {
        "sub": email,
        "type": token_type,
        "exp": exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def bearer(email: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(email)}"}
