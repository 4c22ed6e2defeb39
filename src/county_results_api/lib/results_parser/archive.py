"""ZIP archive extraction.

Walks the members of a downloaded archive in archive order, reads each
CSV member as a stream, and persists its rows before moving on to the
next member. Non-CSV members (and directories) are skipped.
"""

from __future__ import annotations

import asyncio
import csv
import io
import zipfile
import zlib
from typing import TYPE_CHECKING

from loguru import logger

from county_results_api.lib.results_parser.base import HeaderReadError, ParseSummary, check_cancelled
from county_results_api.lib.results_parser.csv_reader import iter_entries
from county_results_api.lib.results_parser.ingest import persist_entries

if TYPE_CHECKING:
    from pathlib import Path

    from county_results_api.lib.results_store.base import ResultsStore

TABULAR_SUFFIX = ".csv"

# zlib.error: corrupt deflate data. EOFError: truncated member. RuntimeError:
# encrypted member or unsupported compression (NotImplementedError).
_MEMBER_ERRORS = (HeaderReadError, csv.Error, zipfile.BadZipFile, OSError, zlib.error, EOFError, RuntimeError)


class ArchiveEntryError(Exception):
    """Raised when one archive member cannot be processed.

    Args:
        filename: Name of the failing member.
        cause: The originating exception.
    """

    def __init__(self, filename: str, cause: BaseException) -> None:
        self.filename = filename
        self.cause = cause
        super().__init__(f"failed to process {filename}: {cause}")


def is_tabular_member(member: zipfile.ZipInfo) -> bool:
    """Whether an archive member is a CSV file (case-insensitive suffix)."""
    return not member.is_dir() and member.filename.lower().endswith(TABULAR_SUFFIX)


async def extract_archive(
    archive_path: Path,
    county_id: str,
    store: ResultsStore,
    *,
    cancel_event: asyncio.Event | None = None,
    summary: ParseSummary | None = None,
) -> ParseSummary:
    """Persist the rows of every CSV member of a ZIP archive.

    The county's collection is created before the first CSV member is read.
    Rows already persisted stay in place if a later member fails or the
    parse is cancelled.

    Args:
        archive_path: Local path of the downloaded archive.
        county_id: County whose collection receives the rows.
        store: Destination results store.
        cancel_event: Optional cancellation signal, checked between members
            and between rows.
        summary: Counters to update; a new summary is created when None.

    Returns:
        The updated summary.

    Raises:
        zipfile.BadZipFile: If the file is not a valid ZIP archive.
        ArchiveEntryError: If a CSV member fails to process.
        PersistenceError: If the county's collection cannot be created.
        ParseCancelledError: If ``cancel_event`` is set.
    """
    if summary is None:
        summary = ParseSummary(county_id=county_id, url=str(archive_path))

    logger.info("Opening archive {}", archive_path)
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()
        logger.info("Found {} files in archive", len(members))

        collection_ready = False
        for member in members:
            await asyncio.sleep(0)
            check_cancelled(cancel_event)

            if not is_tabular_member(member):
                logger.debug("Skipping non-CSV file: {}", member.filename)
                summary.files_skipped += 1
                continue

            if not collection_ready:
                await store.ensure_collection(county_id)
                collection_ready = True

            logger.info("Processing CSV file {} for county {}", member.filename, county_id)
            rows_before = summary.rows_read
            try:
                with (
                    zf.open(member) as raw,
                    io.TextIOWrapper(raw, encoding="utf-8-sig", errors="replace", newline="") as text,
                ):
                    await persist_entries(iter_entries(text, county_id), store, summary, cancel_event=cancel_event)
            except _MEMBER_ERRORS as exc:
                logger.error("Error processing file {}: {}", member.filename, exc)
                raise ArchiveEntryError(member.filename, exc) from exc

            summary.files_processed += 1
            logger.info("Finished {}: {} rows", member.filename, summary.rows_read - rows_before)

    logger.info("Finished processing all files in archive")
    return summary
