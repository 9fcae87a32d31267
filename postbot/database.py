import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class StorageUnavailable(Exception):
    """The store could not be reached or a read/write against it failed."""


def get_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    user = os.getenv("DB_USER", "postbot")
    password = os.getenv("DB_PASSWORD", "")
    host = os.getenv("DB_HOST", "127.0.0.1")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "postbot")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{name}"


def create_engine(url: str | None = None) -> AsyncEngine:
    return create_async_engine(url or get_database_url(), echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine):
    # Register tables on the metadata before create_all
    import postbot.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        raise StorageUnavailable(f"cannot initialize database: {e}") from e


@asynccontextmanager
async def open_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session scope that surfaces driver and connection errors as StorageUnavailable."""
    try:
        async with session_factory() as session:
            yield session
    except (SQLAlchemyError, OSError) as e:
        raise StorageUnavailable(str(e)) from e
