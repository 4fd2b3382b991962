# This project was developed with assistance from AI tools.
"""Integration test fixtures -- real PostgreSQL, no mocks.

A session-scoped container (started once per test run) provides a real
PostgreSQL instance migrated to head. Function-scoped fixtures give each
test an isolated DB session with savepoint rollback so tests don't leak
state, even when services commit.
"""

import os
from collections import namedtuple
from datetime import date
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

# ---------------------------------------------------------------------------
# Mark all tests in this directory as integration
# ---------------------------------------------------------------------------
pytestmark = pytest.mark.integration

_DB_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "..", "db")


# ---------------------------------------------------------------------------
# Session-scoped: container + engine + migrations
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def pg_container():
    """Start postgres:16 via testcontainers."""
    with PostgresContainer(
        image="postgres:16",
        username="test",
        password="test",
        dbname="test",
    ) as pg:
        yield pg


@pytest.fixture(scope="session")
def db_url(pg_container):
    """Async DB URL for asyncpg."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+asyncpg://test:test@{host}:{port}/test"


@pytest.fixture(scope="session")
def sync_db_url(pg_container):
    """Sync DB URL for Alembic (psycopg2)."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql://test:test@{host}:{port}/test"


@pytest.fixture(scope="session", autouse=True)
def _run_migrations(sync_db_url):
    """Run alembic upgrade head against the container."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config(os.path.join(_DB_DIR, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(_DB_DIR, "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_db_url)
    command.upgrade(alembic_cfg, "head")


@pytest.fixture(scope="session")
def async_engine(db_url, _run_migrations):
    """Create an async engine pointing at the test container."""
    engine = create_async_engine(db_url, echo=False, poolclass=NullPool)
    yield engine


@pytest.fixture(scope="session", autouse=True)
def _patch_db_module(async_engine):
    """Point db.database globals at the test database.

    The readiness check goes through the module-level DatabaseService, so
    it must use a factory bound to the container rather than the default
    DATABASE_URL.
    """
    import db.database as db_mod

    test_session_factory = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    db_mod.engine = async_engine
    db_mod.SessionLocal = test_session_factory
    db_mod._db_service = db_mod.DatabaseService(test_session_factory)


# ---------------------------------------------------------------------------
# Function-scoped: per-test session with savepoint rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(async_engine):
    """Per-test DB session with savepoint rollback."""
    conn = await async_engine.connect()
    txn = await conn.begin()
    session = AsyncSession(
        bind=conn,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
        autoflush=False,
    )
    yield session
    await session.close()
    await txn.rollback()
    await conn.close()


@pytest.fixture
def client_factory(db_session):
    """Factory returning an async httpx client with dependency overrides."""
    import db.database as db_mod
    from db.database import get_db, get_db_service

    from policydesk.main import app
    from policydesk.middleware.auth import get_current_user

    def _make(user):
        async def _get_db():
            yield db_session

        async def _get_current_user(request: Request):
            request.state.pii_mask = user.data_scope.pii_mask
            return user

        def _get_db_service():
            return db_mod._db_service

        app.dependency_overrides[get_db] = _get_db
        app.dependency_overrides[get_current_user] = _get_current_user
        app.dependency_overrides[get_db_service] = _get_db_service
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    yield _make

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seed data helper
# ---------------------------------------------------------------------------


SeedData = namedtuple(
    "SeedData",
    [
        "lucia",
        "jorge",
        "otto",
        "lucia_active",
        "lucia_new",
        "jorge_active",
        "otto_active",
    ],
)


@pytest_asyncio.fixture
async def seed_data(db_session):
    """Two teams: Marta manages Alex and Bob, Oscar manages nobody but himself.

    Paula processes for Marta's team.
    """
    from db.enums import PolicyStatus, UserRole
    from db.models import Customer, Policy, ProcessorManagerAssignment, User

    from tests.functional.personas import (
        AGENT_BOB_USER_ID,
        AGENT_USER_ID,
        ANALYST_USER_ID,
        MANAGER_USER_ID,
        OTHER_MANAGER_USER_ID,
        PROCESSOR_USER_ID,
    )

    managers = [
        User(
            id=MANAGER_USER_ID,
            email="marta@policydesk.test",
            first_name="Marta",
            last_name="Ruiz",
            role=UserRole.MANAGER,
        ),
        User(
            id=OTHER_MANAGER_USER_ID,
            email="oscar@policydesk.test",
            first_name="Oscar",
            last_name="Vega",
            role=UserRole.MANAGER,
        ),
    ]
    db_session.add_all(managers)
    await db_session.flush()

    db_session.add_all(
        [
            User(
                id=AGENT_USER_ID,
                email="alex@policydesk.test",
                first_name="Alex",
                last_name="Moreno",
                role=UserRole.AGENT,
                manager_id=MANAGER_USER_ID,
            ),
            User(
                id=AGENT_BOB_USER_ID,
                email="bob@policydesk.test",
                first_name="Bob",
                last_name="Salas",
                role=UserRole.AGENT,
                manager_id=MANAGER_USER_ID,
            ),
            User(
                id=PROCESSOR_USER_ID,
                email="paula@policydesk.test",
                first_name="Paula",
                last_name="Rios",
                role=UserRole.PROCESSOR,
            ),
            User(
                id=ANALYST_USER_ID,
                email="carla@policydesk.test",
                first_name="Carla",
                last_name="Diaz",
                role=UserRole.COMMISSION_ANALYST,
            ),
        ]
    )
    await db_session.flush()
    db_session.add(
        ProcessorManagerAssignment(processor_id=PROCESSOR_USER_ID, manager_id=MANAGER_USER_ID)
    )

    lucia = Customer(
        full_name="Lucia Fernandez",
        birth_date=date(1988, 4, 12),
        email="lucia@example.com",
        created_by_agent_id=AGENT_USER_ID,
    )
    jorge = Customer(
        full_name="Jorge Castillo",
        birth_date=date(1975, 11, 3),
        created_by_agent_id=AGENT_BOB_USER_ID,
    )
    otto = Customer(
        full_name="Otto Brenner",
        birth_date=date(1969, 2, 27),
        created_by_agent_id=OTHER_MANAGER_USER_ID,
    )
    db_session.add_all([lucia, jorge, otto])
    await db_session.flush()

    lucia_active = Policy(
        customer_id=lucia.id,
        status=PolicyStatus.ACTIVE,
        insurance_company="Aetna",
        monthly_premium=Decimal("250.00"),
        effective_date=date(2026, 1, 1),
        assigned_processor_id=PROCESSOR_USER_ID,
    )
    lucia_new = Policy(customer_id=lucia.id, status=PolicyStatus.NEW_LEAD)
    jorge_active = Policy(
        customer_id=jorge.id,
        status=PolicyStatus.ACTIVE,
        insurance_company="Cigna",
        monthly_premium=Decimal("410.50"),
        effective_date=date(2026, 2, 1),
    )
    otto_active = Policy(
        customer_id=otto.id,
        status=PolicyStatus.ACTIVE,
        insurance_company="Ambetter",
        monthly_premium=Decimal("99.99"),
    )
    db_session.add_all([lucia_active, lucia_new, jorge_active, otto_active])
    await db_session.flush()

    return SeedData(
        lucia=lucia.id,
        jorge=jorge.id,
        otto=otto.id,
        lucia_active=lucia_active.id,
        lucia_new=lucia_new.id,
        jorge_active=jorge_active.id,
        otto_active=otto_active.id,
    )
