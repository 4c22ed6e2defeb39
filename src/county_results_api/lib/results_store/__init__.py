"""Results store library: county-scoped persistence of classified results.

Public API:
    - ResultsStore: Abstract store interface
    - InMemoryResultsStore: Dict-backed store for tests and single-process runs
    - SqlResultsStore: SQLAlchemy implementation (one table per county)
    - ClassifiedResult / ResultType: Persisted record and its type tag
    - PersistenceError / CollectionNotFoundError: Store error types
    - collection_name: County id → collection name
    - cleanup_collections: Administrative drop of all results collections
"""

from county_results_api.lib.results_store.base import (
    COUNTY_LINKS_COLLECTION,
    CollectionNotFoundError,
    PersistenceError,
    ResultsStore,
    cleanup_collections,
    collection_name,
    is_protected_collection,
)
from county_results_api.lib.results_store.memory import InMemoryResultsStore
from county_results_api.lib.results_store.sql import SqlResultsStore, build_results_table
from county_results_api.lib.results_store.types import ClassifiedResult, ResultType

__all__ = [
    "COUNTY_LINKS_COLLECTION",
    "ClassifiedResult",
    "CollectionNotFoundError",
    "InMemoryResultsStore",
    "PersistenceError",
    "ResultType",
    "ResultsStore",
    "SqlResultsStore",
    "build_results_table",
    "cleanup_collections",
    "collection_name",
    "is_protected_collection",
]
