"""Abstract parser interface and pipeline error types.

A parser implements one ingestion strategy ("zip", "html", ...). Each
instance owns a scratch directory for downloaded sources, is bound to a
county before parsing, and writes through an injected results store.
"""

from __future__ import annotations

import shutil
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from county_results_api.core.config import DEFAULT_USER_AGENT
from county_results_api.lib.results_parser.types import normalize_county_id

if TYPE_CHECKING:
    import asyncio

    from county_results_api.lib.results_store.base import ResultsStore


class ParseError(Exception):
    """A parse failure tagged with the pipeline stage it occurred in.

    Args:
        stage: Pipeline stage ("download" or "process").
        cause: The originating exception.
    """

    def __init__(self, stage: str, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"parse error at {stage} stage: {cause}")


class HeaderReadError(Exception):
    """Raised when a tabular source is empty or its header row is unreadable."""


class ParseCancelledError(Exception):
    """Raised when a caller-initiated cancellation stops a parse."""


class ParserNotFoundError(LookupError):
    """Raised when no parser is registered for a parse method."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"no parser found for method: {method}")


@dataclass
class ParseSummary:
    """Counters describing one parse invocation."""

    county_id: str
    url: str
    files_processed: int = 0
    files_skipped: int = 0
    rows_read: int = 0
    rows_saved: int = 0
    rows_failed: int = 0


def check_cancelled(cancel_event: asyncio.Event | None) -> None:
    """Raise ParseCancelledError if the cancellation signal is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise ParseCancelledError("Parse cancelled")


class BaseResultsParser(ABC):
    """Abstract parser interface. All parse methods must implement this.

    Args:
        store: Results store every classified row is written to.
        timeout: HTTP timeout in seconds for fetching the source.
        user_agent: User-Agent header sent with the fetch.
        scratch_root: Parent directory for the scratch directory; the
            system temp directory when None.
    """

    def __init__(
        self,
        store: ResultsStore,
        *,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        scratch_root: str | Path | None = None,
    ) -> None:
        self._store = store
        self._timeout = timeout
        self._user_agent = user_agent
        self._scratch_dir = Path(tempfile.mkdtemp(prefix="election_data_", dir=scratch_root))
        self._county_name: str | None = None
        self._county_id: str | None = None

    @property
    @abstractmethod
    def method(self) -> str:
        """Parse method name this parser is registered under (e.g. "zip")."""

    @property
    def scratch_dir(self) -> Path:
        """Directory owned by this parser for downloaded sources."""
        return self._scratch_dir

    @property
    def county_id(self) -> str | None:
        """Normalized identifier of the bound county, if any."""
        return self._county_id

    def set_county_name(self, name: str) -> None:
        """Bind the county whose collection parsed rows are written to.

        Raises:
            ValueError: If the name does not yield a county identifier.
        """
        self._county_id = normalize_county_id(name)
        self._county_name = name

    def _require_county(self) -> str:
        if self._county_id is None:
            msg = "county name not set"
            raise ValueError(msg)
        return self._county_id

    @abstractmethod
    async def parse(self, url: str, *, cancel_event: asyncio.Event | None = None) -> ParseSummary:
        """Fetch ``url`` and persist every parsed row for the bound county.

        Args:
            url: Source URL.
            cancel_event: Optional cancellation signal polled during processing.

        Returns:
            Counters for the completed parse.

        Raises:
            ValueError: If no county is bound.
            ParseError: On download or processing failure.
            ParseCancelledError: If ``cancel_event`` was set mid-parse.
        """

    def cleanup(self) -> None:
        """Remove the scratch directory and anything left in it."""
        if self._scratch_dir.exists():
            logger.debug("Removing parser scratch directory {}", self._scratch_dir)
            shutil.rmtree(self._scratch_dir, ignore_errors=True)

    def __enter__(self) -> BaseResultsParser:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()
