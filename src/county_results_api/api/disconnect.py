"""Cancel in-flight parses when the HTTP client goes away."""

import asyncio
import contextlib
from collections.abc import AsyncIterator

from fastapi import Request
from loguru import logger

# Seconds between disconnect checks.
DISCONNECT_POLL_INTERVAL = 0.5


@contextlib.asynccontextmanager
async def cancel_on_disconnect(request: Request) -> AsyncIterator[asyncio.Event]:
    """Yield a cancellation event that is set once the client disconnects.

    A background task polls ``request.is_disconnected()``. It runs whenever
    the parse suspends: during the download, between archive members, and
    every few hundred rows. Rows written before the event is seen are kept.

    Args:
        request: The request that triggered the parse.

    Yields:
        The event to pass as ``cancel_event``.
    """
    cancel_event = asyncio.Event()

    async def _watch() -> None:
        while not cancel_event.is_set():
            if await request.is_disconnected():
                logger.warning(f"Client disconnected from {request.method} {request.url.path}, cancelling parse")
                cancel_event.set()
                return
            await asyncio.sleep(DISCONNECT_POLL_INTERVAL)

    watcher = asyncio.create_task(_watch())
    try:
        yield cancel_event
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
