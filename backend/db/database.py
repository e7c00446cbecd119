import ssl
from collections.abc import AsyncGenerator
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.config import settings


class Base(DeclarativeBase):
    pass


class DatabaseNotConfigured(RuntimeError):
    """Raised when DATABASE_URL is absent; every data endpoint fails closed on it."""


_engine: Optional[AsyncEngine] = None
_session_maker: Optional[async_sessionmaker] = None


def is_configured() -> bool:
    return bool(settings.database_url)


def _async_database_url(url: str) -> str:
    # Render/Supabase hand out plain postgres URLs; route them through asyncpg.
    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    return url


def _connect_args(url: str) -> dict:
    parsed = make_url(url)
    if parsed.get_backend_name() != "postgresql":
        return {}
    if parsed.host in (None, "localhost", "127.0.0.1"):
        return {}
    # Managed hosts use TLS with certificates we don't pin.
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return {"ssl": ctx}


def get_engine() -> AsyncEngine:
    global _engine, _session_maker
    if not is_configured():
        raise DatabaseNotConfigured("database is not configured")
    if _engine is None:
        url = _async_database_url(settings.database_url)
        _engine = create_async_engine(url, echo=settings.database_echo, connect_args=_connect_args(url))
        _session_maker = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


def get_session_maker() -> async_sessionmaker:
    get_engine()
    return _session_maker


async def create_db_and_tables():
    # Register the models on Base.metadata before create_all.
    import db.inventory  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_maker()() as session:
        yield session
