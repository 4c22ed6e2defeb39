"""Streaming CSV table reader.

Reads a results table row by row. The first row is the header row; the
contest, choice, vote and percentage columns are located by
case-insensitive header match, so column order and capitalization vary
freely between counties. Rows shorter than the header are tolerated:
missing cells read as empty strings.
"""

import csv
from collections.abc import Iterator, Sequence
from typing import TextIO

from county_results_api.lib.results_parser.base import HeaderReadError
from county_results_api.lib.results_parser.coercion import parse_percentage, parse_vote_count
from county_results_api.lib.results_parser.types import RawEntry

CONTEST_COLUMN = "contest name"
CHOICE_COLUMN = "choice name"
VOTES_COLUMN = "total votes"
PERCENT_COLUMN = "percent of votes"


def normalize_header(header: str) -> str:
    """Lower-case and trim a header cell (strips a UTF-8 BOM as well)."""
    return header.replace("\ufeff", "").strip().lower()


def build_header_map(headers: Sequence[str]) -> dict[str, int]:
    """Map normalized header text to its column index.

    When a header repeats, the rightmost column wins.
    """
    return {normalize_header(header): index for index, header in enumerate(headers)}


def _cell(row: Sequence[str], header_map: dict[str, int], column: str) -> str:
    index = header_map.get(column)
    if index is None or index >= len(row):
        return ""
    return row[index]


def entry_from_row(
    headers: Sequence[str],
    header_map: dict[str, int],
    row: Sequence[str],
    county_id: str,
) -> RawEntry:
    """Build a RawEntry from one data row.

    Args:
        headers: Header row as read from the source.
        header_map: Output of build_header_map(headers).
        row: Data row; may be shorter or longer than ``headers``.
        county_id: County the row belongs to.

    Returns:
        The entry, with zero votes/percentage for unparseable cells.
    """
    raw_data = {
        normalize_header(header): row[index] for index, header in enumerate(headers) if index < len(row)
    }
    return RawEntry(
        county_id=county_id,
        title=_cell(row, header_map, CONTEST_COLUMN),
        choice_name=_cell(row, header_map, CHOICE_COLUMN),
        votes=parse_vote_count(_cell(row, header_map, VOTES_COLUMN)),
        percentage=parse_percentage(_cell(row, header_map, PERCENT_COLUMN)),
        raw_data=raw_data,
    )


def iter_entries(source: TextIO, county_id: str) -> Iterator[RawEntry]:
    """Lazily yield one RawEntry per data row of a CSV stream.

    The stream is consumed once; blank lines are skipped.

    Args:
        source: Text stream positioned at the header row.
        county_id: County the rows belong to.

    Yields:
        RawEntry for each data row.

    Raises:
        HeaderReadError: If the stream has no header row or it cannot be read.
        csv.Error: If a later row is malformed beyond recovery.
    """
    reader = csv.reader(source)
    try:
        headers = next(row for row in reader if row)
    except StopIteration:
        msg = "failed to read CSV headers: source is empty"
        raise HeaderReadError(msg) from None
    except (csv.Error, UnicodeDecodeError) as exc:
        msg = f"failed to read CSV headers: {exc}"
        raise HeaderReadError(msg) from exc

    header_map = build_header_map(headers)
    for row in reader:
        if not row:
            continue
        yield entry_from_row(headers, header_map, row, county_id)
