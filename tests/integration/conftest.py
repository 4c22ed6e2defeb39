"""Fixtures for API integration tests: app with SQLite session and in-memory results store."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from county_results_api.core.dependencies import get_async_session, get_results_store
from county_results_api.lib.results_store import InMemoryResultsStore
from county_results_api.main import create_app


@pytest.fixture
def app(async_engine: AsyncEngine, memory_store: InMemoryResultsStore) -> FastAPI:
    """Full application with the database session and results store overridden."""
    app = create_app()
    factory = async_sessionmaker(async_engine, expire_on_commit=False)

    async def _session() -> AsyncGenerator[AsyncSession]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    app.dependency_overrides[get_results_store] = lambda: memory_store
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
