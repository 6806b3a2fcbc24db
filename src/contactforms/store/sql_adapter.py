"""
SQL-backed document store.

Documents are kept as JSON in a single ``documents`` table, partitioned by a
``collection`` column. Equality filters use JSON path extraction, so any
SQLAlchemy dialect with JSON support works (PostgreSQL, SQLite).
"""

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from contactforms.shared.database import DatabaseManager
from contactforms.shared.logging import get_logger
from contactforms.store.interface import (
    CREATED_AT_FIELD,
    DocumentStore,
    DocumentStoreError,
    EqualityFilter,
    SortDirection,
    StoredDocument,
)
from contactforms.store.models import DocumentRow

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SqlDocumentStore(DocumentStore):
    """Document store on top of async SQLAlchemy."""

    def __init__(
        self,
        database_url: str,
        *,
        echo: bool = False,
        engine: AsyncEngine | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._db = DatabaseManager(database_url, echo=echo, engine=engine)
        self._clock = clock

    async def initialize(self) -> None:
        try:
            await self._db.create_all()
        except SQLAlchemyError as exc:
            raise DocumentStoreError(
                f"Failed to initialize SQL document store: {exc}",
                operation="initialize",
            ) from exc
        logger.info("SQL document store initialized")

    async def close(self) -> None:
        await self._db.close()

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        payload = {k: v for k, v in data.items() if k != CREATED_AT_FIELD}
        row = DocumentRow(
            id=uuid4().hex,
            collection=collection,
            data=payload,
            created_at=_as_utc(self._clock()),
        )
        try:
            async with self._db.session() as session:
                session.add(row)
        except SQLAlchemyError as exc:
            raise DocumentStoreError(
                f"Failed to add document: {exc}",
                operation="add",
                collection=collection,
            ) from exc
        return row.id

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        try:
            async with self._db.session() as session:
                row = await session.get(DocumentRow, document_id)
        except SQLAlchemyError as exc:
            raise DocumentStoreError(
                f"Failed to get document: {exc}",
                operation="get",
                collection=collection,
            ) from exc

        if row is None or row.collection != collection:
            return None
        return self._to_document(row)

    async def query(
        self,
        collection: str,
        filters: Sequence[EqualityFilter] = (),
        order_by: str | None = None,
        direction: SortDirection = SortDirection.DESCENDING,
        limit: int | None = None,
    ) -> list[StoredDocument]:
        stmt = select(DocumentRow).where(DocumentRow.collection == collection)

        for flt in filters:
            stmt = stmt.where(DocumentRow.data[flt.field].as_string() == flt.value)

        if order_by is not None:
            if order_by == CREATED_AT_FIELD:
                column = DocumentRow.created_at
            else:
                column = DocumentRow.data[order_by].as_string()
            stmt = stmt.order_by(
                column.desc() if direction == SortDirection.DESCENDING else column.asc()
            )

        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._db.session() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise DocumentStoreError(
                f"Failed to query documents: {exc}",
                operation="query",
                collection=collection,
            ) from exc

        return [self._to_document(row) for row in rows]

    @staticmethod
    def _to_document(row: DocumentRow) -> StoredDocument:
        data = dict(row.data or {})
        data[CREATED_AT_FIELD] = _as_utc(row.created_at)
        return StoredDocument(id=row.id, data=data)
