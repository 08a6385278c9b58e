"""Shared pytest fixtures for API, store and service tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.config import Settings
from school_api.database import Database, get_db
from school_api.dependencies import TableLocks, _service_manager
from school_api.main import app
from school_api.record_service import RecordService


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'school.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def table_locks() -> TableLocks:
    return TableLocks()


@pytest.fixture
def make_service(table_locks: TableLocks):
    """Build a RecordService on a given session without going through FastAPI."""

    def _make(session: AsyncSession, *, serialize: bool = True) -> RecordService:
        ctx = Mock()
        ctx.database = session
        ctx.settings = Settings(SERIALIZE_MUTATIONS=serialize)
        ctx.logger = MagicMock()
        ctx.table_locks = table_locks
        return RecordService.from_context(ctx)

    return _make


@pytest_asyncio.fixture(scope="function")
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    # Every request gets its own session, as with the real pool.
    app.dependency_overrides[get_db] = database.session
    _service_manager.cleanup()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    _service_manager.cleanup()
