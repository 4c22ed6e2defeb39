"""Classification and persistence of parsed entries.

Row-level persistence failures are logged and skipped so that one bad
row does not block a county's ingestion; everything else propagates.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from county_results_api.lib.results_parser.base import ParseSummary, check_cancelled
from county_results_api.lib.results_parser.classifier import classify
from county_results_api.lib.results_store.base import PersistenceError

if TYPE_CHECKING:
    from county_results_api.lib.results_parser.types import RawEntry
    from county_results_api.lib.results_store.base import ResultsStore

_PROGRESS_EVERY = 1000
# Rows between explicit yields to the event loop; reading and decompressing
# rows never suspends on its own.
_YIELD_EVERY = 100


async def persist_entries(
    entries: Iterable[RawEntry],
    store: ResultsStore,
    summary: ParseSummary,
    *,
    cancel_event: asyncio.Event | None = None,
) -> None:
    """Classify and upsert each entry, updating ``summary`` in place.

    The county's collection must already exist (see ``ResultsStore.ensure_collection``).

    Args:
        entries: Parsed entries, typically a lazy reader.
        store: Destination results store.
        summary: Counters to update.
        cancel_event: Optional cancellation signal checked before each row.
            Control returns to the event loop every 100 rows so other
            tasks (including whatever sets the signal) can run.

    Raises:
        ParseCancelledError: If ``cancel_event`` is set.
    """
    for entry in entries:
        if summary.rows_read and summary.rows_read % _YIELD_EVERY == 0:
            await asyncio.sleep(0)
        check_cancelled(cancel_event)
        summary.rows_read += 1
        result = classify(entry)
        try:
            await store.upsert(entry.county_id, result)
        except PersistenceError as exc:
            summary.rows_failed += 1
            logger.warning("Failed to save row {} ({} / {}): {}", summary.rows_read, entry.title, entry.choice_name, exc)
            continue

        summary.rows_saved += 1
        if summary.rows_saved % _PROGRESS_EVERY == 0:
            logger.info("Processed {} rows...", summary.rows_saved)
