"""
Test infrastructure for the Article Image Service.

Strategy
--------
- SQLite in-memory via aiosqlite replaces PostgreSQL, keeping the suite
  self-contained.  StaticPool makes every session share the one
  connection, since an in-memory SQLite database is connection-scoped.
- ``get_db`` is overridden so requests use the test session factory, and
  ``get_image_storage`` is overridden per test to write into ``tmp_path``.
- Tables are created before and dropped after each test.
- Redis is disabled (``cache._redis = None``); the CacheManager turns
  every call into a no-op, so listings always hit the store.
"""
import io
import random
import struct
import zlib
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.cache import CacheManager, cache
from app.database import ArticleSession, Base, get_db
from app.dependencies import get_image_storage
from app.main import app
from app.middleware import install_query_counter
from app.storage import ImageStorage

# ---------------------------------------------------------------------------
# Test database engine
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=ArticleSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_png(width: int, height: int) -> bytes:
    """
    Encode a random-noise RGB PNG.  Noise defeats compression, so the
    file size grows with the pixel count (2000x2000 is well over 6 MB).
    """
    rng = random.Random(width * 10007 + height)
    row_len = width * 3
    raw = b"".join(b"\x00" + rng.randbytes(row_len) for _ in range(height))

    def chunk(tag: bytes, data: bytes) -> bytes:
        body = tag + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body))

    buf = io.BytesIO()
    buf.write(b"\x89PNG\r\n\x1a\n")
    buf.write(chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)))
    buf.write(chunk(b"IDAT", zlib.compress(raw, 1)))
    buf.write(chunk(b"IEND", b""))
    return buf.getvalue()


def article_body(title: str = "Test_Title", **overrides) -> dict:
    body = {
        "title": title,
        "description": "Lorem ipsum",
        "expirationDate": "2030-01-01T00:00:00+00:00",
    }
    body.update(overrides)
    return body


def files_in(directory: Path) -> list[Path]:
    return [p for p in directory.rglob("*") if p.is_file()]


class DictCache(CacheManager):
    """A CacheManager backed by a plain dict, standing in for Redis."""

    def __init__(self):
        super().__init__()
        self.data = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ttl=None):
        self.data[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "images"
    directory.mkdir()
    return directory


@pytest.fixture
def image_storage(image_dir: Path) -> ImageStorage:
    return ImageStorage(image_dir)


@pytest.fixture
def no_cache() -> CacheManager:
    """A CacheManager that was never connected, i.e. a pass-through."""
    return CacheManager()


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live AsyncSession for tests that drive the SQL store directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def file_sessions(tmp_path: Path):
    """
    Session factory over a file-backed SQLite database.  Unlike the shared
    in-memory engine, every session gets its own connection, so one
    session's uncommitted writes are invisible to the others.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'articles.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=ArticleSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def async_client(image_storage: ImageStorage) -> AsyncClient:
    """
    An httpx.AsyncClient wired to the app via ASGITransport, with images
    written to a per-test temporary directory and Redis disabled.
    """
    cache._redis = None
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_image_storage, None)
