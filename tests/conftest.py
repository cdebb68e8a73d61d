"""Pytest fixtures for Termhunt tests."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import termhunt.models  # noqa: F401
from termhunt.database import Base, get_db
from termhunt.main import app
from termhunt.models.listing import Listing
from termhunt.models.user import User

from tests.factories import make_listing, make_user


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def alice(db) -> User:
    return await make_user(db, "alice")


@pytest_asyncio.fixture
async def bob(db) -> User:
    return await make_user(db, "bob")


@pytest_asyncio.fixture
async def listing(db, alice) -> Listing:
    return await make_listing(db, alice, "lazygit")


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """Sessions on separate connections to one on-disk database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'termhunt.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()
