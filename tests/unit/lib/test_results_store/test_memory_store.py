"""Unit tests for the in-memory results store."""

import pytest

from county_results_api.lib.results_store import (
    COUNTY_LINKS_COLLECTION,
    ClassifiedResult,
    CollectionNotFoundError,
    PersistenceError,
    ResultType,
)


def _result(contest: str, choice: str, votes: int = 10, result_type=ResultType.CANDIDATE, is_bond=None):
    return ClassifiedResult(
        county_link="marin",
        type=result_type,
        contest_name=contest,
        choice_name=choice,
        votes=votes,
        percentage=12.5,
        is_bond=is_bond,
    )


class TestInMemoryResultsStore:
    @pytest.mark.asyncio
    async def test_ensure_collection_is_idempotent(self, memory_store):
        await memory_store.ensure_collection("marin")
        await memory_store.upsert("marin", _result("Mayor", "Alice"))
        await memory_store.ensure_collection("marin")
        assert len(await memory_store.query("marin")) == 1
        assert await memory_store.list_collections() == ["county_marin_results"]

    @pytest.mark.asyncio
    async def test_round_trip(self, memory_store):
        await memory_store.ensure_collection("marin")
        stored = await memory_store.upsert(
            "marin", _result("School Bond", "Yes", 800, ResultType.MEASURE, is_bond=True)
        )
        (queried,) = await memory_store.query("marin", ResultType.MEASURE)

        assert stored.id is not None
        assert queried.id == stored.id
        assert (queried.contest_name, queried.choice_name, queried.votes, queried.percentage) == (
            "School Bond",
            "Yes",
            800,
            12.5,
        )
        assert queried.is_bond is True

    @pytest.mark.asyncio
    async def test_candidate_bond_flag_is_dropped(self, memory_store):
        await memory_store.ensure_collection("marin")
        await memory_store.upsert("marin", _result("Mayor", "Alice", is_bond=True))
        (queried,) = await memory_store.query("marin")
        assert queried.is_bond is None

    @pytest.mark.asyncio
    async def test_upsert_replaces_by_natural_key(self, memory_store):
        await memory_store.ensure_collection("marin")
        first = await memory_store.upsert("marin", _result("Mayor", "Alice", 10))
        await memory_store.upsert("marin", _result("Mayor", "Bob", 5))
        second = await memory_store.upsert("marin", _result("Mayor", "Alice", 99))

        results = await memory_store.query("marin")
        assert [(r.choice_name, r.votes) for r in results] == [("Alice", 99), ("Bob", 5)]
        assert second.id == first.id

    @pytest.mark.asyncio
    async def test_query_filters_by_type(self, memory_store):
        await memory_store.ensure_collection("marin")
        await memory_store.upsert("marin", _result("Mayor", "Alice"))
        await memory_store.upsert("marin", _result("Measure A", "Yes", result_type=ResultType.MEASURE, is_bond=False))

        assert [r.choice_name for r in await memory_store.query("marin", ResultType.CANDIDATE)] == ["Alice"]
        assert [r.choice_name for r in await memory_store.query("marin", ResultType.MEASURE)] == ["Yes"]
        assert len(await memory_store.query("marin")) == 2

    @pytest.mark.asyncio
    async def test_query_missing_collection_raises(self, memory_store):
        with pytest.raises(CollectionNotFoundError):
            await memory_store.query("nowhere")

    @pytest.mark.asyncio
    async def test_upsert_without_collection_raises(self, memory_store):
        with pytest.raises(PersistenceError):
            await memory_store.upsert("marin", _result("Mayor", "Alice"))

    @pytest.mark.asyncio
    async def test_query_returns_copies(self, memory_store):
        await memory_store.ensure_collection("marin")
        await memory_store.upsert("marin", _result("Mayor", "Alice", 10))
        (queried,) = await memory_store.query("marin")
        queried.votes = 0
        (again,) = await memory_store.query("marin")
        assert again.votes == 10

    @pytest.mark.asyncio
    async def test_collections_are_county_scoped(self, memory_store):
        await memory_store.ensure_collection("marin")
        await memory_store.ensure_collection("sonoma")
        await memory_store.upsert("marin", _result("Mayor", "Alice"))
        assert await memory_store.query("sonoma") == []
        assert await memory_store.has_collection("sonoma")
        assert not await memory_store.has_collection("napa")

    @pytest.mark.asyncio
    async def test_delete_collection(self, memory_store):
        await memory_store.ensure_collection("marin")
        await memory_store.delete_collection("county_marin_results")
        assert await memory_store.list_collections() == []

    @pytest.mark.asyncio
    async def test_delete_county_links_refused(self, memory_store):
        with pytest.raises(PersistenceError, match="protected"):
            await memory_store.delete_collection(COUNTY_LINKS_COLLECTION)
