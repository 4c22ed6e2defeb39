"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from county_results_api.core.config import get_settings
from county_results_api.core.database import create_schema, dispose_engine, init_engine
from county_results_api.core.dependencies import reset_results_store
from county_results_api.core.logging import setup_logging
from county_results_api.lib.results_parser import ParseCancelledError, ParseError, ParserNotFoundError
from county_results_api.lib.results_store import CollectionNotFoundError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine and schema on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    init_engine(settings.database_url, echo=False)
    await create_schema()

    yield

    reset_results_store()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="County Results API",
        description="County election results ingestion, classification, and grouped presentation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ParserNotFoundError)
    async def parser_not_found_handler(request: Request, exc: ParserNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(CollectionNotFoundError)
    async def collection_not_found_handler(request: Request, exc: CollectionNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "County results not found"})

    @app.exception_handler(ParseError)
    async def parse_error_handler(request: Request, exc: ParseError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc), "stage": exc.stage})

    @app.exception_handler(ParseCancelledError)
    async def parse_cancelled_handler(request: Request, exc: ParseCancelledError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    # Register middleware and routers
    from county_results_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
