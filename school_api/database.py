"""Database configuration and session management for the school records API.

This module provides the SQLAlchemy async engine wrapper, session management,
and database lifecycle operations. The connection pool is owned by a
``Database`` instance that the application creates on startup and stores on
``app.state``; request handlers receive sessions through ``get_db``.

Flow Diagram: Database Operations
=================================
::
    ┌─────────────┐
    │  Application│
    │  Request    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ get_db()     │
    │ dependency  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ app.state.  │
    │ database    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Yield async │
    │ session     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Auto-close   │
    │ (finally)    │
    └─────────────┘

How to Use
===========
**Step 1: Create on startup**::
    database = Database(settings.database_url, pool_size=settings.DB_POOL_SIZE)
    app.state.database = database

**Step 2: Use in FastAPI endpoints**::
    @router.get("/api/student")
    async def list_students(db: AsyncSession = Depends(get_db)):
        ...

**Step 3: Cleanup on shutdown**::
    await database.dispose()

Key Behaviours
===============
- Async sessions are closed after each request.
- The pool is bounded by ``pool_size`` with no overflow; exhaustion waits.
- Tables are only created when asked to; the schema is normally pre-existing.
- The engine is disposed (pool drained) on application shutdown.

Classes:
    Base:  SQLAlchemy declarative base for all models.
    Database:  Engine and session factory owner.

Functions:
    get_db():  FastAPI dependency for database sessions.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

__all__ = ["Base", "Database", "get_db"]


class Base(DeclarativeBase):
    pass


class Database:
    """Owns the async engine (connection pool) and its session factory."""

    def __init__(self, url: str, *, pool_size: int = 10, echo: bool = False) -> None:
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        if make_url(url).get_backend_name() != "sqlite":
            engine_kwargs.update(pool_size=pool_size, max_overflow=0)
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
