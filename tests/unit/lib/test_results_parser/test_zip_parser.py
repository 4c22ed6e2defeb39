"""Unit tests for the ZIP results parser."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from county_results_api.lib.results_parser.base import ParseCancelledError, ParseError
from county_results_api.lib.results_parser.fetcher import FetchError
from county_results_api.lib.results_parser.zip_parser import ZipResultsParser
from county_results_api.lib.results_store import ResultType

FETCH = "county_results_api.lib.results_parser.zip_parser.fetch_to_file"
URL = "https://results.example.gov/marin.zip"


def _fake_fetch(payload: bytes) -> AsyncMock:
    async def _write(url: str, dest: Path, **kwargs) -> Path:
        dest.write_bytes(payload)
        return dest

    return AsyncMock(side_effect=_write)


@pytest.fixture
def parser(memory_store, tmp_path):
    p = ZipResultsParser(memory_store, scratch_root=tmp_path)
    yield p
    p.cleanup()


class TestZipResultsParser:
    def test_method_name(self, parser):
        assert parser.method == "zip"

    def test_scratch_dir_created_with_prefix(self, parser, tmp_path):
        assert parser.scratch_dir.is_dir()
        assert parser.scratch_dir.parent == tmp_path
        assert parser.scratch_dir.name.startswith("election_data_")

    @pytest.mark.asyncio
    async def test_parse_requires_county(self, parser):
        with pytest.raises(ValueError, match="county name not set"):
            await parser.parse(URL)

    @pytest.mark.asyncio
    async def test_parse_persists_rows(self, parser, memory_store, sample_zip_bytes):
        parser.set_county_name("Marin")
        with patch(FETCH, _fake_fetch(sample_zip_bytes)) as mock_fetch:
            summary = await parser.parse(URL)

        mock_fetch.assert_awaited_once()
        assert mock_fetch.await_args.args[1] == parser.scratch_dir / "download.zip"
        assert summary.county_id == "marin"
        assert summary.files_processed == 1
        assert summary.files_skipped == 1
        assert summary.rows_saved == 2

        candidates = await memory_store.query("marin", ResultType.CANDIDATE)
        measures = await memory_store.query("marin", ResultType.MEASURE)
        assert [(c.choice_name, c.votes, c.percentage) for c in candidates] == [("Alice", 1000, 55.0)]
        assert [(m.choice_name, m.votes, m.is_bond) for m in measures] == [("Yes", 800, True)]

    @pytest.mark.asyncio
    async def test_downloaded_archive_removed_after_success(self, parser, sample_zip_bytes):
        parser.set_county_name("Marin")
        with patch(FETCH, _fake_fetch(sample_zip_bytes)):
            await parser.parse(URL)
        assert list(parser.scratch_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_fetch_failure_is_download_stage(self, parser):
        parser.set_county_name("Marin")
        with patch(FETCH, AsyncMock(side_effect=FetchError("unexpected status code: 404", status_code=404))):
            with pytest.raises(ParseError, match="download stage") as exc_info:
                await parser.parse(URL)

        assert exc_info.value.stage == "download"
        assert isinstance(exc_info.value.cause, FetchError)

    @pytest.mark.asyncio
    async def test_corrupt_archive_is_process_stage(self, parser):
        parser.set_county_name("Marin")
        with patch(FETCH, _fake_fetch(b"<html>maintenance</html>")):
            with pytest.raises(ParseError) as exc_info:
                await parser.parse(URL)

        assert exc_info.value.stage == "process"
        assert list(parser.scratch_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_cancelled_parse_propagates_and_cleans_up(self, parser, sample_zip_bytes):
        parser.set_county_name("Marin")
        cancel_event = asyncio.Event()
        cancel_event.set()
        with patch(FETCH, _fake_fetch(sample_zip_bytes)):
            with pytest.raises(ParseCancelledError):
                await parser.parse(URL, cancel_event=cancel_event)
        assert list(parser.scratch_dir.iterdir()) == []

    def test_cleanup_removes_scratch_dir(self, memory_store, tmp_path):
        parser = ZipResultsParser(memory_store, scratch_root=tmp_path)
        scratch = parser.scratch_dir
        parser.cleanup()
        assert not scratch.exists()
        # Idempotent
        parser.cleanup()

    def test_context_manager_cleans_up(self, memory_store, tmp_path):
        with ZipResultsParser(memory_store, scratch_root=tmp_path) as parser:
            scratch = parser.scratch_dir
            assert scratch.exists()
        assert not scratch.exists()
