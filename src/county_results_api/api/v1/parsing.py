"""Parse API endpoints: bulk by method, direct (ad-hoc) parse, and parse-and-format.

Every endpoint stops its parse when the client disconnects; rows written
before that point are kept.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from county_results_api.api.disconnect import cancel_on_disconnect
from county_results_api.core.dependencies import get_async_session, get_parser_registry
from county_results_api.lib.results_parser import ParserRegistry, validate_parse_method
from county_results_api.schemas.county_link import CountyLinkCreateRequest
from county_results_api.schemas.parsing import (
    BulkParseSummary,
    DirectBulkParseRequest,
    DirectBulkParseResponse,
    FormattedParseResponse,
    ParseRequest,
    ParseSummaryResponse,
)
from county_results_api.services import county_link_service, parse_service

parsing_router = APIRouter(prefix="/parse", tags=["parse"])


@parsing_router.post("/method/{method}")
async def parse_by_method(
    method: str,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
) -> BulkParseSummary:
    """Parse every stored county link configured for ``method``.

    Always returns a summary, even when every county fails.
    """
    method = str(validate_parse_method(method))
    links = await county_link_service.list_links(session)
    async with cancel_on_disconnect(request) as cancel_event:
        return await parse_service.parse_all_by_method(registry, links, method, cancel_event=cancel_event)


@parsing_router.post("/direct")
async def parse_direct(
    body: CountyLinkCreateRequest,
    request: Request,
    registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
) -> ParseSummaryResponse:
    """Parse a source without storing a county link."""
    async with cancel_on_disconnect(request) as cancel_event:
        summary = await parse_service.direct_parse(registry, body, cancel_event=cancel_event)
    return ParseSummaryResponse.model_validate(summary)


@parsing_router.post("/direct/bulk")
async def parse_direct_bulk(
    body: DirectBulkParseRequest,
    request: Request,
    registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
) -> DirectBulkParseResponse:
    async with cancel_on_disconnect(request) as cancel_event:
        return await parse_service.direct_bulk_parse(registry, body.requests, cancel_event=cancel_event)


@parsing_router.post("/format")
async def parse_and_format(
    body: ParseRequest,
    request: Request,
    registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
) -> FormattedParseResponse:
    """Parse a source and return its measures or candidates grouped for display."""
    async with cancel_on_disconnect(request) as cancel_event:
        return await parse_service.parse_and_format(registry, body, cancel_event=cancel_event)
