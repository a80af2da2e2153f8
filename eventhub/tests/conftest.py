import os

# Settings are read once at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("PAYMENT_DELAY_SECONDS", "0")
os.environ.setdefault("PAYMENT_FAILURE_RATE", "0")
os.environ.setdefault("LOCK_RETRY_DELAY_MS", "10")
os.environ.setdefault("LOCK_MAX_RETRIES", "500")

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from eventhub.database import get_db
from eventhub.main import app
from eventhub.models import Base, UserRole
from eventhub.payments import SimulatedPaymentGateway, get_payment_gateway
from eventhub.redis_client import get_redis
from eventhub.tests.factories import create_user


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite so every session gets its own connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def redis_client():
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def gateway():
    return SimulatedPaymentGateway(delay_seconds=0, failure_rate=0)


@pytest.fixture
async def client(session_factory, redis_client, gateway):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_redis():
        return redis_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def buyer(db):
    return await create_user(db)


@pytest.fixture
async def admin(db):
    return await create_user(db, email="admin@example.com", role=UserRole.ADMIN)
