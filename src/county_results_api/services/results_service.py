"""Results service -- read stored county results as flat records or grouped views."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from county_results_api.lib.aggregator import MeasureGroup, Race, group_candidates, group_measures
from county_results_api.lib.results_parser import (
    ParseCancelledError,
    ParseError,
    ParserNotFoundError,
    normalize_county_id,
)
from county_results_api.lib.results_store import ResultType
from county_results_api.schemas.results import ResultRecord, ResultsResponse
from county_results_api.services.parse_service import parse_county_link

if TYPE_CHECKING:
    import asyncio

    from county_results_api.lib.results_parser import ParserRegistry
    from county_results_api.lib.results_store import ResultsStore
    from county_results_api.models.county_link import CountyLink


async def get_county_results(
    store: ResultsStore,
    county: str,
    result_type: ResultType | None = None,
) -> ResultsResponse:
    """Return a county's stored results in insertion order.

    Args:
        store: Results store.
        county: County name or identifier.
        result_type: Optional type filter.

    Returns:
        ``{total, results}`` with ``is_bond`` set only for measures.

    Raises:
        CollectionNotFoundError: If the county has never been parsed.
    """
    results = await store.query(normalize_county_id(county), result_type)
    records = [ResultRecord(**r.to_dict()) for r in results]
    return ResultsResponse(total=len(records), results=records)


async def get_measure_groups(store: ResultsStore, county: str) -> list[MeasureGroup]:
    """Measure results for a county grouped by contest title."""
    return group_measures(await store.query(normalize_county_id(county), ResultType.MEASURE))


async def get_candidate_races(store: ResultsStore, county: str) -> list[Race]:
    """Candidate results for a county grouped into races."""
    return group_candidates(await store.query(normalize_county_id(county), ResultType.CANDIDATE))


async def refresh_county_link(
    registry: ParserRegistry,
    county_link: CountyLink,
    *,
    cancel_event: asyncio.Event | None = None,
) -> bool:
    """Parse the latest data for a county before serving it.

    A failed or cancelled refresh is logged and reported as False;
    previously stored results remain readable.
    """
    try:
        await parse_county_link(registry, county_link, cancel_event=cancel_event)
    except (ParseError, ParseCancelledError, ParserNotFoundError, ValueError) as exc:
        logger.warning(f"Failed to parse latest data for {county_link.county_name}: {exc}")
        return False
    logger.info(f"Successfully parsed latest data for county {county_link.county_name}")
    return True
