"""Shared async setup for CLI commands that touch the database or results store."""

import asyncio
import signal
from collections.abc import AsyncGenerator, Iterator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from county_results_api.core.config import Settings, get_settings
from county_results_api.core.database import create_schema, dispose_engine, get_session_factory, init_engine
from county_results_api.core.dependencies import build_results_store
from county_results_api.lib.results_parser import ParserRegistry, create_default_registry
from county_results_api.lib.results_store import ResultsStore


@dataclass
class CliRuntime:
    settings: Settings
    session_factory: async_sessionmaker[AsyncSession]
    store: ResultsStore
    registry: ParserRegistry


@asynccontextmanager
async def cli_runtime() -> AsyncGenerator[CliRuntime]:
    """Initialize the engine, fixed schema, store, and parser registry; dispose on exit."""
    settings = get_settings()
    init_engine(settings.database_url, echo=False)
    try:
        await create_schema()
        store = build_results_store(settings)
        yield CliRuntime(
            settings=settings,
            session_factory=get_session_factory(),
            store=store,
            registry=create_default_registry(store, settings),
        )
    finally:
        await dispose_engine()


def _interrupted(cancel_event: asyncio.Event) -> None:
    if not cancel_event.is_set():
        logger.warning("Interrupted, stopping the parse at the next row")
    cancel_event.set()


@contextmanager
def cancel_on_interrupt() -> Iterator[asyncio.Event]:
    """Yield a cancellation event that Ctrl-C (SIGINT) sets while the block runs.

    Must be entered with an event loop running. Where the loop cannot take
    over SIGINT (non-Unix platforms, non-main threads), Ctrl-C keeps its
    default behavior and the event is never set.
    """
    loop = asyncio.get_running_loop()
    cancel_event = asyncio.Event()
    try:
        loop.add_signal_handler(signal.SIGINT, _interrupted, cancel_event)
        installed = True
    except (NotImplementedError, RuntimeError):
        installed = False
    try:
        yield cancel_event
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)
