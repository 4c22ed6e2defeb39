"""SQLAlchemy-backed results store.

Each county gets its own ``county_<id>_results`` table, declared with
SQLAlchemy Core on first use and created lazily with ``checkfirst``.
The county links table shares the database but is never touched here
other than being listed (and skipped) during cleanup.
"""

import asyncio
import uuid
from collections import defaultdict

from loguru import logger
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
    inspect,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from county_results_api.lib.results_store.base import (
    CollectionNotFoundError,
    PersistenceError,
    ResultsStore,
    collection_name,
    is_protected_collection,
)
from county_results_api.lib.results_store.types import ClassifiedResult, ResultType


def build_results_table(name: str, metadata: MetaData) -> Table:
    """Declare the fixed results schema under ``name``.

    Args:
        name: Table name (``county_<id>_results``).
        metadata: MetaData the table is registered on.

    Returns:
        The declared Table.
    """
    return Table(
        name,
        metadata,
        Column("seq", Integer, primary_key=True, autoincrement=True),
        Column("id", String(36), nullable=False, unique=True),
        Column("county_link", String(200), nullable=False),
        Column("type", String(16), nullable=False),
        Column("contest_name", Text, nullable=False),
        Column("choice_name", Text, nullable=False),
        Column("votes", Integer, nullable=False, default=0),
        Column("percentage", Float, nullable=False, default=0.0),
        Column("is_bond", Boolean, nullable=True),
        Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
        Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
        CheckConstraint("type IN ('candidate', 'measure')", name=f"ck_{name}_type"),
        UniqueConstraint("contest_name", "choice_name", name=f"uq_{name}_contest_choice"),
    )


class SqlResultsStore(ResultsStore):
    """Results store that keeps one table per county in a SQL database.

    Writes to a single county's table are serialized with a per-county lock.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._metadata = MetaData()
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def _table(self, name: str) -> Table:
        table = self._metadata.tables.get(name)
        if table is None:
            table = build_results_table(name, self._metadata)
        return table

    async def _table_exists(self, name: str) -> bool:
        async with self._engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).has_table(name))

    async def ensure_collection(self, county_id: str) -> None:
        name = collection_name(county_id)
        table = self._table(name)
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(table.create, checkfirst=True)
        except SQLAlchemyError as exc:
            msg = f"Failed to create collection {name}: {exc}"
            raise PersistenceError(msg, collection=name) from exc

    async def upsert(self, county_id: str, result: ClassifiedResult) -> ClassifiedResult:
        name = collection_name(county_id)
        table = self._table(name)
        values = {
            "county_link": result.county_link,
            "type": str(result.type),
            "contest_name": result.contest_name,
            "choice_name": result.choice_name,
            "votes": result.votes,
            "percentage": result.percentage,
            "is_bond": result.is_bond if result.type == ResultType.MEASURE else None,
        }
        async with self._locks[name]:
            try:
                async with self._engine.begin() as conn:
                    existing = (
                        await conn.execute(
                            select(table.c.id).where(
                                table.c.contest_name == result.contest_name,
                                table.c.choice_name == result.choice_name,
                            )
                        )
                    ).first()
                    if existing is None:
                        record_id = str(uuid.uuid4())
                        await conn.execute(insert(table).values(id=record_id, **values))
                    else:
                        record_id = existing.id
                        await conn.execute(
                            update(table).where(table.c.id == record_id).values(**values, updated_at=func.now())
                        )
            except SQLAlchemyError as exc:
                msg = f"Failed to save record in {name}: {exc}"
                raise PersistenceError(msg, collection=name) from exc

        return ClassifiedResult(
            county_link=result.county_link,
            type=result.type,
            contest_name=result.contest_name,
            choice_name=result.choice_name,
            votes=result.votes,
            percentage=result.percentage,
            is_bond=values["is_bond"],
            id=record_id,
        )

    async def query(
        self,
        county_id: str,
        result_type: ResultType | None = None,
    ) -> list[ClassifiedResult]:
        name = collection_name(county_id)
        if not await self._table_exists(name):
            raise CollectionNotFoundError(county_id)

        table = self._table(name)
        stmt = select(table).order_by(table.c.seq)
        if result_type is not None:
            stmt = stmt.where(table.c.type == str(result_type))

        async with self._engine.connect() as conn:
            rows = (await conn.execute(stmt)).all()

        results = []
        for row in rows:
            row_type = ResultType(row.type)
            results.append(
                ClassifiedResult(
                    county_link=row.county_link,
                    type=row_type,
                    contest_name=row.contest_name,
                    choice_name=row.choice_name,
                    votes=int(row.votes),
                    percentage=float(row.percentage),
                    is_bond=bool(row.is_bond) if row_type == ResultType.MEASURE else None,
                    id=row.id,
                )
            )
        return results

    async def list_collections(self) -> list[str]:
        async with self._engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    async def delete_collection(self, name: str) -> None:
        if is_protected_collection(name):
            msg = f"Refusing to delete protected collection {name}"
            raise PersistenceError(msg, collection=name)

        table = self._table(name)
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(table.drop, checkfirst=True)
        except SQLAlchemyError as exc:
            msg = f"Failed to delete collection {name}: {exc}"
            raise PersistenceError(msg, collection=name) from exc
        finally:
            self._metadata.remove(table)
        logger.info("Deleted collection {}", name)
