"""CORS and request logging middleware."""

import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from county_results_api.core.config import Settings

PROCESS_TIME_HEADER = "X-Process-Time"


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the configured front-end origins to call the API."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=[PROCESS_TIME_HEADER],
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status and duration.

    Parse endpoints download and ingest whole county sources within the
    request, so the elapsed time is also returned in ``X-Process-Time``
    (seconds).
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.3f}"
        logger.info(
            "{} {} -> {} in {:.3f}s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response
