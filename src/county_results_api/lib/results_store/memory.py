"""In-memory results store.

Dict-backed implementation of the store contract, used by tests and by
single-process deployments that do not need results to survive a restart.
"""

import asyncio
import uuid
from dataclasses import replace

from county_results_api.lib.results_store.base import (
    CollectionNotFoundError,
    PersistenceError,
    ResultsStore,
    collection_name,
    is_protected_collection,
)
from county_results_api.lib.results_store.types import ClassifiedResult, ResultType


class InMemoryResultsStore(ResultsStore):
    """Results store backed by per-county ordered dicts."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[tuple[str, str], ClassifiedResult]] = {}
        self._lock = asyncio.Lock()

    async def ensure_collection(self, county_id: str) -> None:
        self._collections.setdefault(collection_name(county_id), {})

    async def upsert(self, county_id: str, result: ClassifiedResult) -> ClassifiedResult:
        name = collection_name(county_id)
        async with self._lock:
            records = self._collections.get(name)
            if records is None:
                raise PersistenceError(f"Collection {name} does not exist", collection=name)
            key = (result.contest_name, result.choice_name)
            existing = records.get(key)
            record_id = existing.id if existing is not None else str(uuid.uuid4())
            stored = replace(
                result,
                id=record_id,
                is_bond=result.is_bond if result.type == ResultType.MEASURE else None,
            )
            # Re-assigning an existing key keeps its original position.
            records[key] = stored
            return replace(stored)

    async def query(
        self,
        county_id: str,
        result_type: ResultType | None = None,
    ) -> list[ClassifiedResult]:
        records = self._collections.get(collection_name(county_id))
        if records is None:
            raise CollectionNotFoundError(county_id)
        return [
            replace(record)
            for record in records.values()
            if result_type is None or record.type == result_type
        ]

    async def list_collections(self) -> list[str]:
        return list(self._collections)

    async def delete_collection(self, name: str) -> None:
        if is_protected_collection(name):
            raise PersistenceError(f"Refusing to delete protected collection {name}", collection=name)
        self._collections.pop(name, None)
