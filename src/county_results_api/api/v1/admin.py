"""Administrative API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from loguru import logger

from county_results_api.core.dependencies import get_results_store
from county_results_api.lib.results_store import ResultsStore, cleanup_collections
from county_results_api.schemas.results import CleanupResponse

admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.post("/cleanup-collections")
async def cleanup_results_collections(
    store: Annotated[ResultsStore, Depends(get_results_store)],
) -> CleanupResponse:
    """Drop every per-county results collection, keeping the county links table."""
    outcome = await cleanup_collections(store)
    message = f"Deleted {len(outcome['deleted'])} collections, skipped {len(outcome['skipped'])}"
    logger.info(message)
    return CleanupResponse(deleted=outcome["deleted"], skipped=outcome["skipped"], message=message)
