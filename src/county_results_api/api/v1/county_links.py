"""County link API endpoints: CRUD, bulk save, per-link parse, and grouped results."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from county_results_api.api.disconnect import cancel_on_disconnect
from county_results_api.core.dependencies import get_async_session, get_parser_registry, get_results_store
from county_results_api.lib.results_parser import ParserRegistry, normalize_county_id
from county_results_api.lib.results_store import ResultsStore
from county_results_api.models.county_link import CountyLink
from county_results_api.schemas.county_link import (
    BulkCountyLinkRequest,
    BulkSaveResponse,
    CountyLinkCreateRequest,
    CountyLinkListResponse,
    CountyLinkResponse,
    CountyLinkUpdateRequest,
)
from county_results_api.schemas.parsing import ParseSummaryResponse
from county_results_api.schemas.results import (
    MeasureGroupSchema,
    MeasureGroupsResponse,
    RaceSchema,
    RacesResponse,
)
from county_results_api.services import county_link_service, results_service
from county_results_api.services.parse_service import parse_county_link

county_links_router = APIRouter(prefix="/county-links", tags=["county-links"])


async def _get_link_or_404(session: AsyncSession, link_id: uuid.UUID) -> CountyLink:
    link = await county_link_service.get_link(session, link_id)
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="County link not found")
    return link


@county_links_router.post("", status_code=status.HTTP_201_CREATED)
async def create_county_link(
    body: CountyLinkCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> CountyLinkResponse:
    """Register a county data source."""
    link = await county_link_service.create_link(session, body)
    return CountyLinkResponse.model_validate(link)


@county_links_router.get("")
async def list_county_links(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    parse_method: Annotated[str | None, Query(description="Filter by parse method")] = None,
) -> CountyLinkListResponse:
    links = await county_link_service.list_links(session, parse_method=parse_method)
    return CountyLinkListResponse(
        items=[CountyLinkResponse.model_validate(link) for link in links],
        total=len(links),
    )


@county_links_router.post("/bulk")
async def bulk_create_county_links(
    body: BulkCountyLinkRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> BulkSaveResponse:
    """Save many county links; every link is validated before any is saved."""
    return await county_link_service.bulk_create_links(session, body.links)


@county_links_router.get("/{link_id}")
async def get_county_link(
    link_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> CountyLinkResponse:
    return CountyLinkResponse.model_validate(await _get_link_or_404(session, link_id))


@county_links_router.put("/{link_id}")
async def update_county_link(
    link_id: uuid.UUID,
    body: CountyLinkUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> CountyLinkResponse:
    link = await county_link_service.update_link(session, link_id, body)
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="County link not found")
    return CountyLinkResponse.model_validate(link)


@county_links_router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_county_link(
    link_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> None:
    if not await county_link_service.delete_link(session, link_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="County link not found")


@county_links_router.post("/{link_id}/parse")
async def parse_county_link_endpoint(
    link_id: uuid.UUID,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
) -> ParseSummaryResponse:
    """Fetch and ingest the latest results for one stored county link.

    Parse failures surface as 502 with the failing stage. A client disconnect
    cancels the parse; rows already written are kept.
    """
    link = await _get_link_or_404(session, link_id)
    async with cancel_on_disconnect(request) as cancel_event:
        summary = await parse_county_link(registry, link, cancel_event=cancel_event)
    logger.info(f"Parsed county link {link_id}: {summary.rows_saved} rows saved")
    return ParseSummaryResponse.model_validate(summary)


@county_links_router.get("/{link_id}/measures")
async def get_county_measures(
    link_id: uuid.UUID,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    store: Annotated[ResultsStore, Depends(get_results_store)],
    registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
    refresh: Annotated[bool, Query(description="Parse the latest data before reading")] = False,
) -> MeasureGroupsResponse:
    """Measure results for a county grouped by contest."""
    link = await _get_link_or_404(session, link_id)
    if refresh:
        async with cancel_on_disconnect(request) as cancel_event:
            await results_service.refresh_county_link(registry, link, cancel_event=cancel_event)
    groups = await results_service.get_measure_groups(store, link.county_name)
    return MeasureGroupsResponse(
        county_id=normalize_county_id(link.county_name),
        groups=[MeasureGroupSchema.model_validate(g) for g in groups],
    )


@county_links_router.get("/{link_id}/candidates")
async def get_county_candidates(
    link_id: uuid.UUID,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    store: Annotated[ResultsStore, Depends(get_results_store)],
    registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
    refresh: Annotated[bool, Query(description="Parse the latest data before reading")] = False,
) -> RacesResponse:
    """Candidate results for a county grouped into races."""
    link = await _get_link_or_404(session, link_id)
    if refresh:
        async with cancel_on_disconnect(request) as cancel_event:
            await results_service.refresh_county_link(registry, link, cancel_event=cancel_event)
    races = await results_service.get_candidate_races(store, link.county_name)
    return RacesResponse(
        county_id=normalize_county_id(link.county_name),
        races=[RaceSchema.model_validate(r) for r in races],
    )
