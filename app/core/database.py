"""
Database configuration - SQLAlchemy 2.0 async.
Engine and session factory builders, request session dependency.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import Settings


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for every model."""


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine described by the settings."""
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    The session is committed when the request handler returns and rolled
    back when it raises.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a group of mutations as a single all-or-nothing unit.

    Pending changes are flushed at the end of the block. Any exception
    rolls the whole transaction back before propagating unchanged.
    """
    try:
        yield session
        await session.flush()
    except Exception:
        await session.rollback()
        raise


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables (development only, production uses Alembic)."""
    # Models must be imported so their tables are registered on the metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")


async def close_db(engine: AsyncEngine) -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()
    logger.info("Database connections closed")
