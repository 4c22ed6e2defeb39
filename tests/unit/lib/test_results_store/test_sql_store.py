"""Unit tests for the SQLAlchemy results store (in-memory SQLite)."""

import pytest

from county_results_api.lib.results_store import (
    COUNTY_LINKS_COLLECTION,
    ClassifiedResult,
    CollectionNotFoundError,
    PersistenceError,
    ResultType,
    cleanup_collections,
)


def _result(contest: str, choice: str, votes: int = 10, result_type=ResultType.CANDIDATE, is_bond=None):
    return ClassifiedResult(
        county_link="marin",
        type=result_type,
        contest_name=contest,
        choice_name=choice,
        votes=votes,
        percentage=42.5,
        is_bond=is_bond,
    )


class TestSqlResultsStore:
    @pytest.mark.asyncio
    async def test_ensure_collection_creates_table(self, sql_store):
        await sql_store.ensure_collection("marin")
        await sql_store.ensure_collection("marin")
        collections = await sql_store.list_collections()
        assert "county_marin_results" in collections
        # Shares the database with the county links table.
        assert COUNTY_LINKS_COLLECTION in collections

    @pytest.mark.asyncio
    async def test_round_trip(self, sql_store):
        await sql_store.ensure_collection("marin")
        await sql_store.upsert("marin", _result("Mayor", "Alice", 1000))
        await sql_store.upsert("marin", _result("School Bond", "Yes", 800, ResultType.MEASURE, is_bond=True))

        (candidate,) = await sql_store.query("marin", ResultType.CANDIDATE)
        (measure,) = await sql_store.query("marin", ResultType.MEASURE)

        assert (candidate.contest_name, candidate.choice_name, candidate.votes) == ("Mayor", "Alice", 1000)
        assert candidate.percentage == pytest.approx(42.5)
        assert candidate.is_bond is None
        assert measure.is_bond is True
        assert measure.type == ResultType.MEASURE

    @pytest.mark.asyncio
    async def test_measure_without_bond_reads_false(self, sql_store):
        await sql_store.ensure_collection("marin")
        await sql_store.upsert("marin", _result("Measure K", "No", result_type=ResultType.MEASURE, is_bond=False))
        (measure,) = await sql_store.query("marin")
        assert measure.is_bond is False

    @pytest.mark.asyncio
    async def test_upsert_replaces_by_natural_key_keeping_order(self, sql_store):
        await sql_store.ensure_collection("marin")
        first = await sql_store.upsert("marin", _result("Mayor", "Alice", 10))
        await sql_store.upsert("marin", _result("Mayor", "Bob", 5))
        again = await sql_store.upsert("marin", _result("Mayor", "Alice", 99))

        results = await sql_store.query("marin")
        assert [(r.choice_name, r.votes) for r in results] == [("Alice", 99), ("Bob", 5)]
        assert again.id == first.id

    @pytest.mark.asyncio
    async def test_query_missing_collection_raises(self, sql_store):
        with pytest.raises(CollectionNotFoundError):
            await sql_store.query("nowhere")

    @pytest.mark.asyncio
    async def test_upsert_without_collection_raises_persistence_error(self, sql_store):
        with pytest.raises(PersistenceError):
            await sql_store.upsert("nowhere", _result("Mayor", "Alice"))

    @pytest.mark.asyncio
    async def test_delete_collection(self, sql_store):
        await sql_store.ensure_collection("marin")
        await sql_store.delete_collection("county_marin_results")
        assert "county_marin_results" not in await sql_store.list_collections()
        with pytest.raises(CollectionNotFoundError):
            await sql_store.query("marin")

    @pytest.mark.asyncio
    async def test_collection_recreated_after_delete(self, sql_store):
        await sql_store.ensure_collection("marin")
        await sql_store.delete_collection("county_marin_results")
        await sql_store.ensure_collection("marin")
        await sql_store.upsert("marin", _result("Mayor", "Alice"))
        assert len(await sql_store.query("marin")) == 1

    @pytest.mark.asyncio
    async def test_delete_county_links_refused(self, sql_store):
        with pytest.raises(PersistenceError, match="protected"):
            await sql_store.delete_collection(COUNTY_LINKS_COLLECTION)

    @pytest.mark.asyncio
    async def test_cleanup_keeps_county_links(self, sql_store):
        await sql_store.ensure_collection("marin")
        await sql_store.ensure_collection("sonoma")

        outcome = await cleanup_collections(sql_store)

        assert sorted(outcome["deleted"]) == ["county_marin_results", "county_sonoma_results"]
        assert outcome["skipped"] == [COUNTY_LINKS_COLLECTION]
        assert await sql_store.list_collections() == [COUNTY_LINKS_COLLECTION]
