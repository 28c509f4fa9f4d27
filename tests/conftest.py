"""Shared fixtures: in-memory database, frozen clock and Jalali adapter."""

from datetime import datetime, timezone

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.clock import FixedClock
from components.core.database import DatabaseManager
from components.core.init_db import get_db
from components.installment.reconciler import PlanLocks
from components.installment.repository import InstallmentRepository
from components.jalali.adapter import DateFormatConfig, JalaliDateAdapter
from restapi.router import create_app

# 14 Aban 1404, 12:00 in Tehran
NOW = datetime(2025, 11, 5, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def adapter():
    return JalaliDateAdapter(DateFormatConfig(timezone="Asia/Tehran"))


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
async def db_manager():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    manager = DatabaseManager(engine)
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
async def session(db_manager):
    async with db_manager.get_db() as session:
        yield session


@pytest.fixture
def installments(session, adapter, clock):
    return InstallmentRepository(session, adapter=adapter, clock=clock, locks=PlanLocks())


@pytest.fixture
async def client(db_manager):
    app = create_app()

    async def override_get_db():
        async with db_manager.get_db() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
