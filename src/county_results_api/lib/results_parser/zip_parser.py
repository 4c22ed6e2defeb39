"""ZIP parser: county results published as a ZIP of CSV tables."""

from __future__ import annotations

import zipfile
from typing import TYPE_CHECKING

from loguru import logger

from county_results_api.lib.results_parser.archive import ArchiveEntryError, extract_archive
from county_results_api.lib.results_parser.base import BaseResultsParser, ParseError, ParseSummary
from county_results_api.lib.results_parser.fetcher import FetchError, fetch_to_file
from county_results_api.lib.results_parser.types import ParseMethod
from county_results_api.lib.results_store.base import PersistenceError

if TYPE_CHECKING:
    import asyncio


class ZipResultsParser(BaseResultsParser):
    """Download a ZIP archive and ingest every CSV table inside it."""

    @property
    def method(self) -> str:
        return ParseMethod.ZIP

    async def parse(self, url: str, *, cancel_event: asyncio.Event | None = None) -> ParseSummary:
        county_id = self._require_county()
        logger.info("Starting to parse {} for county {}", url, county_id)

        archive_path = self.scratch_dir / "download.zip"
        try:
            try:
                await fetch_to_file(
                    url,
                    archive_path,
                    timeout=self._timeout,
                    user_agent=self._user_agent,
                )
            except FetchError as exc:
                logger.error("Error downloading archive: {}", exc)
                raise ParseError("download", exc) from exc

            summary = ParseSummary(county_id=county_id, url=url)
            try:
                await extract_archive(
                    archive_path,
                    county_id,
                    self._store,
                    cancel_event=cancel_event,
                    summary=summary,
                )
            except (ArchiveEntryError, PersistenceError, zipfile.BadZipFile, OSError) as exc:
                logger.error("Error processing archive: {}", exc)
                raise ParseError("process", exc) from exc
        finally:
            archive_path.unlink(missing_ok=True)
            archive_path.with_suffix(".zip.part").unlink(missing_ok=True)

        logger.info(
            "Successfully parsed {}: {} files, {} rows saved, {} rows failed",
            county_id,
            summary.files_processed,
            summary.rows_saved,
            summary.rows_failed,
        )
        return summary
