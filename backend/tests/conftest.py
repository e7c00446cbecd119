import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import db.inventory  # noqa: F401
from core.config import settings
from db.database import Base, get_async_session
from db.inventory import Item
from main import app


@pytest.fixture
def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'precheck.db'}", poolclass=NullPool)

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create())
    yield async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(session_maker, monkeypatch):
    monkeypatch.setattr(settings, "database_url", "sqlite+aiosqlite://")

    async def _override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(monkeypatch):
    monkeypatch.setattr(settings, "database_url", None)
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def add_items(session_maker):
    """Insert catalog rows and return their ids in order."""

    def _add(*items: Item) -> list[int]:
        async def _run():
            async with session_maker() as db:
                db.add_all(items)
                await db.commit()
                return [it.id for it in items]

        return asyncio.run(_run())

    return _add
