"""Stored results API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from county_results_api.core.dependencies import get_results_store
from county_results_api.lib.results_store import ResultsStore, ResultType
from county_results_api.schemas.results import ResultsResponse
from county_results_api.services import results_service

results_router = APIRouter(prefix="/results", tags=["results"])


@results_router.get("/{county_id}", response_model_exclude_none=True)
async def get_results(
    county_id: str,
    store: Annotated[ResultsStore, Depends(get_results_store)],
    result_type: Annotated[ResultType | None, Query(alias="type")] = None,
) -> ResultsResponse:
    """Flat list of a county's stored results, optionally filtered by type.

    ``county_id`` may be the county name or its identifier.
    """
    return await results_service.get_county_results(store, county_id, result_type)
