"""Test fixtures: in-memory SQLite store and async runtime."""

import os
import sys
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from decimal import Decimal
from pathlib import Path

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from property_registry.config import get_settings
from property_registry.models import Base, Owner, PropertyType
from property_registry.schemas.property import CreatePropertyRequest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as db_session:
        yield db_session


@pytest.fixture
def owner_factory(session: AsyncSession) -> Callable[..., Awaitable[Owner]]:
    async def _create(**overrides: object) -> Owner:
        values: dict[str, object] = {
            "name": "John Smith",
            "address": "123 Main St, New York, NY 10001",
            "email": f"owner-{uuid.uuid4().hex[:8]}@example.com",
        }
        values.update(overrides)
        owner = Owner(id=uuid.uuid4(), **values)
        session.add(owner)
        await session.commit()
        return owner

    return _create


@pytest.fixture
def property_request_factory() -> Callable[..., CreatePropertyRequest]:
    def _build(owner_id: uuid.UUID, **overrides: object) -> CreatePropertyRequest:
        values: dict[str, object] = {
            "name": "Sunny Bungalow",
            "address": "10 Ocean Dr",
            "price": Decimal("250000"),
            "code_internal": f"P-{uuid.uuid4().hex[:8]}",
            "year": 2005,
            "property_type": PropertyType.HOUSE,
            "city": "Miami",
            "state": "FL",
            "owner_id": owner_id,
        }
        values.update(overrides)
        return CreatePropertyRequest.model_validate(values)

    return _build
