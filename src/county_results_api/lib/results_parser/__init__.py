"""Results parser library: fetch, extract, parse, and classify county election results.

Public API:
    - ParserRegistry / create_default_registry: Parse method strategy table
    - BaseResultsParser: Abstract parser interface
    - ZipResultsParser: ZIP-of-CSV parser ("zip")
    - HtmlResultsParser: HTML table parser ("html")
    - ParseSummary: Counters returned by a parse
    - ParseError / HeaderReadError / ParseCancelledError / ParserNotFoundError / FetchError
    - classify_entry: Candidate vs. measure heuristic
    - parse_vote_count / parse_percentage / format_vote_count / format_percentage
    - iter_entries: Streaming CSV table reader
    - extract_archive: ZIP member walker
    - fetch_to_file: Browser-like HTTP download
"""

from county_results_api.lib.results_parser.archive import ArchiveEntryError, extract_archive
from county_results_api.lib.results_parser.base import (
    BaseResultsParser,
    HeaderReadError,
    ParseCancelledError,
    ParseError,
    ParserNotFoundError,
    ParseSummary,
)
from county_results_api.lib.results_parser.classifier import classify, classify_entry
from county_results_api.lib.results_parser.coercion import (
    format_percentage,
    format_vote_count,
    parse_percentage,
    parse_vote_count,
)
from county_results_api.lib.results_parser.csv_reader import iter_entries
from county_results_api.lib.results_parser.fetcher import FetchError, fetch_to_file
from county_results_api.lib.results_parser.html_parser import HtmlResultsParser
from county_results_api.lib.results_parser.registry import ParserRegistry, create_default_registry
from county_results_api.lib.results_parser.types import (
    ParseMethod,
    RawEntry,
    normalize_county_id,
    validate_parse_method,
)
from county_results_api.lib.results_parser.zip_parser import ZipResultsParser

__all__ = [
    "ArchiveEntryError",
    "BaseResultsParser",
    "FetchError",
    "HeaderReadError",
    "HtmlResultsParser",
    "ParseCancelledError",
    "ParseError",
    "ParseMethod",
    "ParseSummary",
    "ParserNotFoundError",
    "ParserRegistry",
    "RawEntry",
    "ZipResultsParser",
    "classify",
    "classify_entry",
    "create_default_registry",
    "extract_archive",
    "fetch_to_file",
    "format_percentage",
    "format_vote_count",
    "iter_entries",
    "normalize_county_id",
    "parse_percentage",
    "parse_vote_count",
    "validate_parse_method",
]
