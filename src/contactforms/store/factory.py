"""
Document store factory and FastAPI dependency.

The store is built and initialized once in the application lifespan and kept
on ``app.state``; request handlers receive it through ``get_document_store``.
"""

from __future__ import annotations

from fastapi import Request

from contactforms.config import Settings, StoreBackend
from contactforms.shared.exceptions import StoreUnavailableError
from contactforms.shared.logging import get_logger
from contactforms.store.firestore_adapter import FirestoreDocumentStore
from contactforms.store.interface import DocumentStore
from contactforms.store.sql_adapter import SqlDocumentStore

logger = get_logger(__name__)


def build_document_store(settings: Settings) -> DocumentStore:
    """Create (but do not initialize) the configured document store."""
    logger.info(
        "Document store config resolved",
        extra={
            "store_backend": getattr(settings.store_backend, "value", str(settings.store_backend)),
            "contacts_collection": settings.contacts_collection,
        },
    )

    if settings.store_backend == StoreBackend.FIRESTORE:
        return FirestoreDocumentStore(settings)

    if settings.store_backend == StoreBackend.SQL:
        return SqlDocumentStore(settings.database_url, echo=settings.debug)

    raise ValueError(f"Unsupported store_backend: {settings.store_backend}")


def get_document_store(request: Request) -> DocumentStore:
    """FastAPI dependency returning the process-wide document store."""
    store = getattr(request.app.state, "document_store", None)
    if store is None:
        raise StoreUnavailableError("Document store is not initialized")
    return store
