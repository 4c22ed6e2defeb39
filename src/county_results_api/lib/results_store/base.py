"""Abstract results store interface for county-scoped result collections."""

from abc import ABC, abstractmethod

from county_results_api.lib.results_store.types import ClassifiedResult, ResultType

# Table that holds county link configuration; never a results collection.
COUNTY_LINKS_COLLECTION = "county_links"


def collection_name(county_id: str) -> str:
    """Deterministic collection name for a county identifier."""
    return f"county_{county_id}_results"


def is_protected_collection(name: str) -> bool:
    """Whether an administrative cleanup must leave ``name`` in place."""
    return name == COUNTY_LINKS_COLLECTION or name.startswith("_")


class PersistenceError(Exception):
    """Raised when a results collection cannot be created, written, or dropped.

    Args:
        message: Human-readable error description.
        collection: Name of the collection involved, when known.
    """

    def __init__(self, message: str, collection: str | None = None) -> None:
        self.message = message
        self.collection = collection
        super().__init__(message)


class CollectionNotFoundError(LookupError):
    """Raised when querying a county that has no results collection yet."""

    def __init__(self, county_id: str) -> None:
        self.county_id = county_id
        super().__init__(f"No results collection for county '{county_id}'")


class ResultsStore(ABC):
    """Narrow persistence interface used by the parse pipeline and the read path.

    Records are keyed by (county, contest_name, choice_name): writing the
    same key twice replaces the stored votes, percentage, and bond flag in
    place rather than appending a duplicate row.
    """

    @abstractmethod
    async def ensure_collection(self, county_id: str) -> None:
        """Create the county's results collection if it does not exist (idempotent)."""

    @abstractmethod
    async def upsert(self, county_id: str, result: ClassifiedResult) -> ClassifiedResult:
        """Insert or replace one classified result.

        Returns:
            The stored result with its ``id`` populated.

        Raises:
            PersistenceError: On schema or I/O failure.
        """

    @abstractmethod
    async def query(
        self,
        county_id: str,
        result_type: ResultType | None = None,
    ) -> list[ClassifiedResult]:
        """Return the county's results in insertion order, optionally filtered by type.

        Raises:
            CollectionNotFoundError: If the county has no collection.
        """

    @abstractmethod
    async def list_collections(self) -> list[str]:
        """Return the names of every collection held by the store."""

    @abstractmethod
    async def delete_collection(self, name: str) -> None:
        """Drop a collection by name.

        Raises:
            PersistenceError: If ``name`` is the county links table or the drop fails.
        """

    async def has_collection(self, county_id: str) -> bool:
        """Whether the county already has a results collection."""
        return collection_name(county_id) in await self.list_collections()


async def cleanup_collections(store: ResultsStore) -> dict[str, list[str]]:
    """Drop every collection except county links and system (``_``-prefixed) ones.

    Args:
        store: The results store to clean.

    Returns:
        ``{"deleted": [...], "skipped": [...]}`` collection names.

    Raises:
        PersistenceError: If a drop fails; collections dropped before the
            failure stay dropped.
    """
    deleted: list[str] = []
    skipped: list[str] = []
    for name in await store.list_collections():
        if is_protected_collection(name):
            skipped.append(name)
            continue
        await store.delete_collection(name)
        deleted.append(name)
    return {"deleted": deleted, "skipped": skipped}
