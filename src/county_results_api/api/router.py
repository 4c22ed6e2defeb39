"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from county_results_api.api.middleware import RequestLoggingMiddleware, setup_cors
from county_results_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from county_results_api.api.v1.admin import admin_router
    from county_results_api.api.v1.county_links import county_links_router
    from county_results_api.api.v1.parsing import parsing_router
    from county_results_api.api.v1.results import results_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(county_links_router)
    root_router.include_router(parsing_router)
    root_router.include_router(results_router)
    root_router.include_router(admin_router)
    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    CORS is added last so it wraps request logging.
    """
    app.add_middleware(RequestLoggingMiddleware)
    setup_cors(app, settings)
