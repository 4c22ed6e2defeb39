"""FastAPI dependency injection for database sessions, the results store, and parsers.

The results store is a process-wide instance built from settings on first
use; tests replace it through ``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from county_results_api.core.config import Settings, get_settings
from county_results_api.core.database import get_engine, get_session_factory
from county_results_api.lib.results_parser import ParserRegistry, create_default_registry
from county_results_api.lib.results_store import InMemoryResultsStore, ResultsStore, SqlResultsStore

_results_store: ResultsStore | None = None


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def build_results_store(settings: Settings) -> ResultsStore:
    """Create the results store selected by ``settings.results_store_backend``."""
    if settings.results_store_backend == "memory":
        return InMemoryResultsStore()
    return SqlResultsStore(get_engine())


def get_results_store() -> ResultsStore:
    """Return the shared results store, creating it on first use."""
    global _results_store  # noqa: PLW0603
    if _results_store is None:
        _results_store = build_results_store(get_settings())
    return _results_store


def reset_results_store() -> None:
    """Forget the shared results store (called on shutdown)."""
    global _results_store  # noqa: PLW0603
    _results_store = None


def get_parser_registry(
    store: Annotated[ResultsStore, Depends(get_results_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ParserRegistry:
    """Return a parser registry bound to the shared results store."""
    return create_default_registry(store, settings)
