"""Async engine lifecycle for the county links table and results collections.

County links (ORM) and per-county results tables (Core) live in the same
database, so one engine and one session factory serve both.
"""

from pathlib import Path

from loguru import logger
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _not_initialized(what: str) -> RuntimeError:
    return RuntimeError(f"{what} not initialized. Call init_engine() first.")


def get_engine() -> AsyncEngine:
    """Return the current async engine.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _engine is None:
        raise _not_initialized("Database engine")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the current session factory.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _session_factory is None:
        raise _not_initialized("Session factory")
    return _session_factory


def engine_options(database_url: str, overrides: dict[str, object] | None = None) -> dict[str, object]:
    """Build ``create_async_engine`` keyword arguments for a connection string.

    An in-memory SQLite database exists per connection, so it is pinned to a
    single shared connection; otherwise county links and results tables
    created on different connections would not see each other. Server
    backends get a bounded connection pool.

    Args:
        database_url: Async SQLAlchemy connection string.
        overrides: Caller-supplied options, applied last.

    Returns:
        Engine keyword arguments.
    """
    url = make_url(database_url)
    options: dict[str, object] = {}
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = 10
        options["max_overflow"] = 5
    options.update(overrides or {})
    if options.get("poolclass") is StaticPool:
        options.pop("pool_size", None)
        options.pop("max_overflow", None)
    return options


def _ensure_sqlite_parent(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def init_engine(database_url: str, **kwargs: object) -> AsyncEngine:
    """Create and store the async engine and session factory.

    Args:
        database_url: Async SQLAlchemy connection string
            (``sqlite+aiosqlite://...`` or ``postgresql+asyncpg://...``).
        **kwargs: Additional arguments passed to create_async_engine.

    Returns:
        The created async engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    _ensure_sqlite_parent(database_url)
    _engine = create_async_engine(database_url, **engine_options(database_url, kwargs))
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    logger.debug("Database engine initialized for {}", make_url(database_url).render_as_string(hide_password=True))
    return _engine


async def create_schema(engine: AsyncEngine | None = None) -> None:
    """Create the county links table if it does not exist.

    Per-county results tables are created lazily by the results store.
    """
    from county_results_api.models import Base

    target = engine or get_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose of the async engine and release its connections."""
    global _engine, _session_factory  # noqa: PLW0603
    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
