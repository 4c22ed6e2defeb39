"""Shared test fixtures for async database, results stores, and sample result sources."""

import io
import zipfile
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from county_results_api.core.config import Settings
from county_results_api.lib.results_store import InMemoryResultsStore, SqlResultsStore
from county_results_api.models.base import Base

SAMPLE_CSV = (
    "Contest Name,Choice Name,Total Votes,Percent of Votes\n"
    "Mayor,Alice,1000,55%\n"
    "School Bond,Yes,800,NA\n"
)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        results_store_backend="memory",
        scratch_dir=str(tmp_path),
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine shared across connections."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def memory_store() -> InMemoryResultsStore:
    return InMemoryResultsStore()


@pytest.fixture
def sql_store(async_engine: AsyncEngine) -> SqlResultsStore:
    return SqlResultsStore(async_engine)


@pytest.fixture
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a ZIP archive from ``{member_name: text}`` pairs, in order."""

    def _make(members: dict[str, str], name: str = "results.zip") -> Path:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for member_name, content in members.items():
                zf.writestr(member_name, content)
        path = tmp_path / name
        path.write_bytes(buf.getvalue())
        return path

    return _make


@pytest.fixture
def sample_zip_bytes() -> bytes:
    """A ZIP holding the two-row sample CSV plus a non-CSV readme."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("readme.txt", "not a table")
        zf.writestr("results.csv", SAMPLE_CSV)
    return buf.getvalue()


@pytest.fixture
def corrupt_zip_bytes() -> bytes:
    """A deflated ZIP whose ``results.csv`` member has damaged compressed data."""
    rows = "".join(f"Contest {i},Choice {i},{i * 37},{i % 100}%\n" for i in range(300))
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("results.csv", SAMPLE_CSV.splitlines(keepends=True)[0] + rows)
    data = bytearray(buf.getvalue())

    info = zipfile.ZipFile(io.BytesIO(bytes(data))).getinfo("results.csv")
    # Local file header: 30 fixed bytes, then the name and extra field.
    data_start = info.header_offset + 30 + len(info.filename.encode()) + len(info.extra)
    for i in range(data_start + 60, data_start + 120):
        data[i] ^= 0xFF
    return bytes(data)
