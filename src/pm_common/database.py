from collections.abc import AsyncGenerator
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings
from src.pm_common.memory_store import get_memory_store


class UnitOfWork(Protocol):
    """What services need from a session: staged writes become visible on commit.

    Satisfied by SQLAlchemy's AsyncSession and by MemorySession.
    """

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[Any, None]:
    """FastAPI dependency: yields a unit of work for the configured backend, auto-closes after request."""
    if settings.STORE_BACKEND == "memory":
        async with get_memory_store().session() as session:
            yield session
        return
    async with async_session_factory() as session:
        yield session
