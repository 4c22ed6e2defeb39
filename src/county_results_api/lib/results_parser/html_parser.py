"""HTML parser: county results published as tables on a web page.

Every ``<table>`` on the page is read with BeautifulSoup. The first row of
a table is its header row and is mapped exactly like a CSV header, so the
same "Contest Name" / "Choice Name" / "Total Votes" / "Percent of Votes"
columns drive the row model. Tables carrying neither a contest nor a
choice column (navigation, layout) are skipped.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup
from loguru import logger

from county_results_api.lib.results_parser.base import (
    BaseResultsParser,
    HeaderReadError,
    ParseError,
    ParseSummary,
    check_cancelled,
)
from county_results_api.lib.results_parser.csv_reader import (
    CHOICE_COLUMN,
    CONTEST_COLUMN,
    build_header_map,
    entry_from_row,
)
from county_results_api.lib.results_parser.fetcher import FetchError, fetch_to_file
from county_results_api.lib.results_parser.ingest import persist_entries
from county_results_api.lib.results_parser.types import ParseMethod, RawEntry
from county_results_api.lib.results_store.base import PersistenceError

if TYPE_CHECKING:
    import asyncio

    from bs4.element import Tag


def _row_cells(row: Tag) -> list[str]:
    return [cell.get_text(strip=True) for cell in row.find_all(["th", "td"])]


def iter_table_entries(table: Tag, county_id: str) -> Iterator[RawEntry] | None:
    """Entries for one HTML table, or None when it is not a results table.

    Args:
        table: A ``<table>`` element.
        county_id: County the rows belong to.

    Returns:
        A lazy iterator of entries, or None if the table has no header row or
        neither a contest nor a choice column.
    """
    rows = table.find_all("tr")
    if not rows:
        return None
    headers = _row_cells(rows[0])
    header_map = build_header_map(headers)
    if CONTEST_COLUMN not in header_map and CHOICE_COLUMN not in header_map:
        return None

    def _entries() -> Iterator[RawEntry]:
        for row in rows[1:]:
            cells = _row_cells(row)
            if not any(cells):
                continue
            yield entry_from_row(headers, header_map, cells, county_id)

    return _entries()


class HtmlResultsParser(BaseResultsParser):
    """Download an HTML results page and ingest its result tables."""

    @property
    def method(self) -> str:
        return ParseMethod.HTML

    async def parse(self, url: str, *, cancel_event: asyncio.Event | None = None) -> ParseSummary:
        county_id = self._require_county()
        logger.info("Starting to parse HTML page {} for county {}", url, county_id)

        page_path = self.scratch_dir / "download.html"
        try:
            try:
                await fetch_to_file(
                    url,
                    page_path,
                    timeout=self._timeout,
                    user_agent=self._user_agent,
                )
            except FetchError as exc:
                logger.error("Error downloading page: {}", exc)
                raise ParseError("download", exc) from exc

            summary = ParseSummary(county_id=county_id, url=url)
            try:
                await self._process_page(page_path.read_text(encoding="utf-8", errors="replace"), summary, cancel_event)
            except (HeaderReadError, PersistenceError, OSError) as exc:
                logger.error("Error processing page: {}", exc)
                raise ParseError("process", exc) from exc
        finally:
            page_path.unlink(missing_ok=True)
            page_path.with_suffix(".html.part").unlink(missing_ok=True)

        logger.info(
            "Successfully parsed {}: {} tables, {} rows saved, {} rows failed",
            county_id,
            summary.files_processed,
            summary.rows_saved,
            summary.rows_failed,
        )
        return summary

    async def _process_page(
        self,
        html: str,
        summary: ParseSummary,
        cancel_event: asyncio.Event | None,
    ) -> None:
        soup = BeautifulSoup(html, "html.parser")
        tables = soup.find_all("table")
        logger.info("Found {} tables on page", len(tables))

        collection_ready = False
        for table in tables:
            check_cancelled(cancel_event)
            entries = iter_table_entries(table, summary.county_id)
            if entries is None:
                summary.files_skipped += 1
                continue
            if not collection_ready:
                await self._store.ensure_collection(summary.county_id)
                collection_ready = True
            await persist_entries(entries, self._store, summary, cancel_event=cancel_event)
            summary.files_processed += 1

        if summary.files_processed == 0:
            msg = "no results table found on page"
            raise HeaderReadError(msg)
