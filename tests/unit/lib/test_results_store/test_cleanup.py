"""Unit tests for the administrative collection cleanup."""

from unittest.mock import AsyncMock

import pytest

from county_results_api.lib.results_store import (
    COUNTY_LINKS_COLLECTION,
    InMemoryResultsStore,
    PersistenceError,
    cleanup_collections,
    collection_name,
    is_protected_collection,
)


class TestCollectionNames:
    def test_collection_name(self):
        assert collection_name("san_luis_obispo") == "county_san_luis_obispo_results"

    @pytest.mark.parametrize("name", [COUNTY_LINKS_COLLECTION, "_system", "_pb_users"])
    def test_protected(self, name):
        assert is_protected_collection(name)

    def test_results_collection_not_protected(self):
        assert not is_protected_collection("county_marin_results")


class TestCleanupCollections:
    @pytest.mark.asyncio
    async def test_deletes_results_and_skips_protected(self):
        store = InMemoryResultsStore()
        await store.ensure_collection("marin")
        await store.ensure_collection("sonoma")

        outcome = await cleanup_collections(store)

        assert outcome == {"deleted": ["county_marin_results", "county_sonoma_results"], "skipped": []}
        assert await store.list_collections() == []

    @pytest.mark.asyncio
    async def test_protected_names_never_deleted(self):
        store = AsyncMock()
        store.list_collections = AsyncMock(return_value=[COUNTY_LINKS_COLLECTION, "_meta", "county_a_results"])

        outcome = await cleanup_collections(store)

        store.delete_collection.assert_awaited_once_with("county_a_results")
        assert outcome == {"deleted": ["county_a_results"], "skipped": [COUNTY_LINKS_COLLECTION, "_meta"]}

    @pytest.mark.asyncio
    async def test_drop_failure_propagates(self):
        store = AsyncMock()
        store.list_collections = AsyncMock(return_value=["county_a_results"])
        store.delete_collection = AsyncMock(side_effect=PersistenceError("locked"))
        with pytest.raises(PersistenceError):
            await cleanup_collections(store)
