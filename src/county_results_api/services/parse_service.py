"""Parse orchestration -- run the ingestion pipeline for stored or ad-hoc county sources.

Every parse resolves a fresh parser from the registry, binds the county,
runs it, and releases the parser's scratch directory. Bulk operations run
counties one after another and isolate failures per county.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from county_results_api.lib.aggregator import group_candidates, group_measures
from county_results_api.lib.results_parser import (
    ParseError,
    ParserNotFoundError,
    ParseSummary,
    normalize_county_id,
)
from county_results_api.lib.results_store import ResultType
from county_results_api.schemas.parsing import (
    BulkParseSummary,
    DirectBulkParseResponse,
    DirectParseResult,
    FormattedParseResponse,
    ParseRequest,
    ParseSummaryResponse,
)
from county_results_api.schemas.results import MeasureGroupSchema, RaceSchema

if TYPE_CHECKING:
    import asyncio

    from county_results_api.lib.results_parser import ParserRegistry
    from county_results_api.models.county_link import CountyLink
    from county_results_api.schemas.county_link import CountyLinkCreateRequest

# Failures recorded per county in bulk runs; cancellation is not among them.
_COUNTY_FAILURES = (ParseError, ParserNotFoundError, ValueError)


async def run_parse(
    registry: ParserRegistry,
    *,
    county_name: str,
    link: str,
    parse_method: str,
    cancel_event: asyncio.Event | None = None,
) -> ParseSummary:
    """Parse one county source with the parser registered for ``parse_method``.

    Args:
        registry: Parser registry.
        county_name: County the results belong to.
        link: Source URL.
        parse_method: Registered parse method name.
        cancel_event: Optional cancellation signal.

    Returns:
        The parse summary.

    Raises:
        ParserNotFoundError: If ``parse_method`` is not registered.
        ValueError: If the county name is unusable.
        ParseError: If the download or processing stage fails.
        ParseCancelledError: If ``cancel_event`` is set during the parse.
    """
    parser = registry.resolve(parse_method)
    with parser, logger.contextualize(county=county_name):
        parser.set_county_name(county_name)
        return await parser.parse(link, cancel_event=cancel_event)


async def parse_county_link(
    registry: ParserRegistry,
    county_link: CountyLink,
    *,
    cancel_event: asyncio.Event | None = None,
) -> ParseSummary:
    """Parse the source configured by a stored county link."""
    logger.info(f"Parsing county link {county_link.id} ({county_link.county_name})")
    return await run_parse(
        registry,
        county_name=county_link.county_name,
        link=county_link.link,
        parse_method=county_link.parse_method,
        cancel_event=cancel_event,
    )


async def parse_all_by_method(
    registry: ParserRegistry,
    county_links: list[CountyLink],
    method: str,
    *,
    cancel_event: asyncio.Event | None = None,
) -> BulkParseSummary:
    """Parse every county link configured for ``method``, sequentially.

    Links configured for another method are counted in ``total_counties``
    but not processed. A county's failure is recorded and the run moves on.

    Raises:
        ParserNotFoundError: If ``method`` is not registered.
        ParseCancelledError: If ``cancel_event`` is set; counties already
            parsed keep their results.
    """
    if method not in registry.methods():
        raise ParserNotFoundError(method)

    summary = BulkParseSummary(method=method, total_counties=len(county_links))
    for county_link in county_links:
        if county_link.parse_method != method:
            logger.debug(f"Skipping {county_link.county_name}: method {county_link.parse_method} != {method}")
            continue
        summary.processed += 1
        try:
            await parse_county_link(registry, county_link, cancel_event=cancel_event)
        except _COUNTY_FAILURES as exc:
            logger.warning(f"Failed to parse county {county_link.county_name}: {exc}")
            summary.failed.append(f"County {county_link.county_name}: {exc}")
            continue
        summary.successful += 1

    logger.info(
        f"Bulk parse ({method}) complete: {summary.processed} processed, "
        f"{summary.successful} successful, {len(summary.failed)} failed"
    )
    return summary


async def direct_parse(
    registry: ParserRegistry,
    request: CountyLinkCreateRequest,
    *,
    cancel_event: asyncio.Event | None = None,
) -> ParseSummary:
    """Parse an ad-hoc source without storing a county link."""
    return await run_parse(
        registry,
        county_name=request.county_name,
        link=request.link,
        parse_method=request.parse_method,
        cancel_event=cancel_event,
    )


async def direct_bulk_parse(
    registry: ParserRegistry,
    requests: list[CountyLinkCreateRequest],
    *,
    cancel_event: asyncio.Event | None = None,
) -> DirectBulkParseResponse:
    """Parse many ad-hoc sources, reporting success or failure for each."""
    results: list[DirectParseResult] = []
    for request in requests:
        try:
            await direct_parse(registry, request, cancel_event=cancel_event)
        except _COUNTY_FAILURES as exc:
            logger.warning(f"Direct parse failed for {request.county_name}: {exc}")
            results.append(DirectParseResult(county_name=request.county_name, success=False, error=str(exc)))
            continue
        results.append(DirectParseResult(county_name=request.county_name, success=True))

    successful = sum(1 for r in results if r.success)
    logger.info(f"Direct bulk parse complete: {successful}/{len(results)} successful")
    return DirectBulkParseResponse(results=results, total=len(results), successful=successful)


async def parse_and_format(
    registry: ParserRegistry,
    request: ParseRequest,
    *,
    cancel_event: asyncio.Event | None = None,
) -> FormattedParseResponse:
    """Parse a source, then return the grouped view of the requested result type.

    Raises:
        ValueError: If ``request.result_type`` is missing.
    """
    if request.result_type is None:
        msg = "result_type is required (measures or candidates)"
        raise ValueError(msg)

    summary = await direct_parse(registry, request, cancel_event=cancel_event)
    county_id = normalize_county_id(request.county_name)
    response = FormattedParseResponse(
        summary=ParseSummaryResponse.model_validate(summary),
        result_type=request.result_type,
    )
    # A source with no rows never creates its collection.
    if not await registry.store.has_collection(county_id):
        if request.result_type == "measures":
            response.measure_groups = []
        else:
            response.races = []
        return response

    if request.result_type == "measures":
        results = await registry.store.query(county_id, ResultType.MEASURE)
        response.measure_groups = [MeasureGroupSchema.model_validate(g) for g in group_measures(results)]
    else:
        results = await registry.store.query(county_id, ResultType.CANDIDATE)
        response.races = [RaceSchema.model_validate(r) for r in group_candidates(results)]
    return response
