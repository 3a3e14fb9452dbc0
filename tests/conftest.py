"""Pytest fixtures for studio finance tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from studio_finance.api.app import create_app
from studio_finance.api.dependencies import get_db_session
from studio_finance.calculators.types import MemberPolicy
from studio_finance.models import Base, ClientEvent, ClientEventMember, Expense, TeamMember

# In-memory SQLite shared by every connection of the engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TENANT_ID = "tenant_lumiere"
OTHER_TENANT_ID = "tenant_other"


@pytest.fixture
def per_event_member() -> MemberPolicy:
    return MemberPolicy(member_id="mem_anita", payment_type="per-event", salary="5000")


@pytest.fixture
def per_month_member() -> MemberPolicy:
    return MemberPolicy(member_id="mem_ravi", payment_type="per-month", salary="20000")


@pytest_asyncio.fixture
async def engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


def _event(
    event_id: str,
    project_id: str,
    event_date: datetime | None,
    member_ids: list[str],
    tenant_id: str = TENANT_ID,
) -> ClientEvent:
    event = ClientEvent(
        client_event_id=event_id,
        tenant_id=tenant_id,
        project_id=project_id,
        event_name=event_id.replace("ev_", "").title(),
        event_date=event_date,
    )
    event.assignments = [ClientEventMember(member_id=m) for m in member_ids]
    return event


def _expense(
    expense_id: str,
    amount: str,
    date: datetime,
    member_id: str | None = None,
    project_id: str | None = None,
    tenant_id: str = TENANT_ID,
    category: str = "salary",
) -> Expense:
    return Expense(
        expense_id=expense_id,
        tenant_id=tenant_id,
        member_id=member_id,
        project_id=project_id,
        amount=Decimal(amount),
        comment=f"Payment {expense_id}",
        date=date,
        category=category,
    )


@pytest_asyncio.fixture
async def seeded_session(session: AsyncSession) -> AsyncSession:
    """A studio with two projects, four members and their payments.

    proj_sharma: three events (Jan 5, Jan 20, Feb 2) for Anita and Ravi
    proj_mehta:  one event (Mar 10) for Ravi and Kiran

    Anita  per-event 5000  -> sharma payable 15000, paid 10000 (+2000 general)
    Ravi   per-month 20000 -> sharma 40000 (paid 45000), mehta 20000 (unpaid)
    Kiran  no policy       -> payable 0, paid 1500 on mehta
    Sunil  per-event 3000  -> no events
    """
    session.add_all([
        TeamMember(
            member_id="mem_anita",
            tenant_id=TENANT_ID,
            first_name="Anita",
            last_name="Rao",
            payment_type="per-event",
            salary="5000",
        ),
        TeamMember(
            member_id="mem_ravi",
            tenant_id=TENANT_ID,
            first_name="Ravi",
            last_name="Menon",
            payment_type="per-month",
            salary="20000",
        ),
        TeamMember(
            member_id="mem_kiran",
            tenant_id=TENANT_ID,
            first_name="Kiran",
            last_name="Das",
        ),
        TeamMember(
            member_id="mem_sunil",
            tenant_id=TENANT_ID,
            first_name="Sunil",
            last_name="Iyer",
            payment_type="per-event",
            salary="3000",
        ),
        TeamMember(
            member_id="mem_other",
            tenant_id=OTHER_TENANT_ID,
            first_name="Olga",
            last_name="Other",
            payment_type="per-event",
            salary="1000",
        ),
    ])
    await session.flush()

    session.add_all([
        _event("ev_haldi", "proj_sharma", datetime(2024, 1, 5, 9, 0), ["mem_anita", "mem_ravi"]),
        _event("ev_sangeet", "proj_sharma", datetime(2024, 1, 20, 18, 0), ["mem_anita", "mem_ravi"]),
        _event("ev_wedding", "proj_sharma", datetime(2024, 2, 2, 11, 0), ["mem_anita", "mem_ravi"]),
        _event("ev_reception", "proj_mehta", datetime(2024, 3, 10, 19, 0), ["mem_ravi", "mem_kiran"]),
        # Another tenant's event must never be visible
        _event(
            "ev_foreign",
            "proj_sharma",
            datetime(2024, 1, 7),
            ["mem_anita", "mem_other"],
            tenant_id=OTHER_TENANT_ID,
        ),
    ])
    session.add_all([
        _expense("exp_anita_1", "10000", datetime(2024, 2, 10), "mem_anita", "proj_sharma"),
        _expense("exp_anita_general", "2000", datetime(2024, 3, 1), "mem_anita"),
        _expense("exp_ravi_1", "45000", datetime(2024, 2, 15), "mem_ravi", "proj_sharma"),
        _expense("exp_kiran_1", "1500", datetime(2024, 3, 12), "mem_kiran", "proj_mehta"),
        _expense("exp_venue", "8000", datetime(2024, 1, 3), None, "proj_sharma", category="venue"),
        _expense(
            "exp_foreign",
            "99999",
            datetime(2024, 1, 8),
            "mem_anita",
            "proj_sharma",
            tenant_id=OTHER_TENANT_ID,
        ),
    ])
    await session.flush()
    return session


@pytest_asyncio.fixture
async def client(seeded_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the seeded session."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield seeded_session

    app.dependency_overrides[get_db_session] = override_db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
