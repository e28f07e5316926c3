"""
Blog API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession (service unit tests)
    ├── temp_storage:    Temporary public storage disk
    ├── storage_root:    temp_storage wired into the image_service singleton
    ├── png_bytes / png_data_uri: Tiny PNG payload and its data URI
    ├── db_engine / db_session:   In-memory SQLite with the blogs table
    └── test_client:     HTTPX AsyncClient against the app on the test DB
"""

import base64
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="blog_api_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ASSET_URL", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from blog_api.database import Base
from blog_api.models.blog import Blog  # noqa: F401
from blog_api.services.image_service import image_service


# ══════════════════════════════════════════════════════════════════════════
# Mocks & Sample Data
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = blog
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def png_bytes():
    """PNG signature followed by an IHDR-sized filler (24 bytes, a multiple of 3)."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 8


@pytest.fixture
def png_data_uri(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def sample_blog_data():
    """Dictionary matching the Blog model fields."""
    now = datetime.now(timezone.utc)
    return {
        "id": 1,
        "title": "First post",
        "description": "Hello from the first post.",
        "image": "storage/blogs/blog_1700000000_abcdef0123456.png",
        "author": "Sam",
        "created_at": now,
        "updated_at": now,
    }


# ══════════════════════════════════════════════════════════════════════════
# Storage
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    """A fresh public storage directory for each test."""
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def storage_root(temp_storage, monkeypatch) -> Path:
    """Points the shared image_service at temp_storage for the test's duration."""
    root = Path(temp_storage).resolve()
    monkeypatch.setattr(image_service, "storage_root", root)
    return root


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite shared by every session of the test (StaticPool)."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory, storage_root, monkeypatch):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The real get_db_session dependency runs, with its session factory
    pointed at the in-memory test database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/blogs")
    """
    from blog_api import database
    from blog_api.main import app

    monkeypatch.setattr(database, "async_session_factory", session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
