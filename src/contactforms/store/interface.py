"""
Document store interface definition.

A document store is addressed by collection name; documents are schemaless
mappings. Backends assign identifiers and stamp ``createdAt`` on insert.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CREATED_AT_FIELD = "createdAt"


class SortDirection(str, Enum):
    """Ordering direction (values match Firestore's direction strings)."""

    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


@dataclass(frozen=True)
class EqualityFilter:
    """``field == value`` restriction pushed down to the store."""

    field: str
    value: str


@dataclass(frozen=True)
class StoredDocument:
    """A document as read back from the store."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


class DocumentStoreError(Exception):
    """Base exception for document store failures."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        collection: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.collection = collection


class DocumentStore(ABC):
    """Abstract interface for document store backends.

    Instances are process-wide: ``initialize`` is called once at startup and
    ``close`` once at shutdown.
    """

    async def initialize(self) -> None:
        """Acquire clients/connections. Default: nothing to do."""

    async def close(self) -> None:
        """Release clients/connections. Default: nothing to do."""

    @abstractmethod
    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert a document and return its store-assigned identifier."""
        ...

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        """Fetch a document by identifier."""
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[EqualityFilter] = (),
        order_by: str | None = None,
        direction: SortDirection = SortDirection.DESCENDING,
        limit: int | None = None,
    ) -> list[StoredDocument]:
        """Run an equality-filtered, optionally ordered query."""
        ...

    async def exists(self, collection: str, field: str, value: str) -> bool:
        """Return True when at least one document has ``field == value``."""
        docs = await self.query(
            collection,
            filters=[EqualityFilter(field=field, value=value)],
            limit=1,
        )
        return bool(docs)
