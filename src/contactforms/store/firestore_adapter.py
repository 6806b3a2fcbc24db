"""
Cloud Firestore document store adapter (firebase-admin).

Credentials come from Settings: project id, service-account client email and
private key. The Firebase app is created on ``initialize`` and deleted on
``close``; it is never the process-wide default app.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from contactforms.config import Settings
from contactforms.shared.logging import get_logger
from contactforms.store.interface import (
    CREATED_AT_FIELD,
    DocumentStore,
    DocumentStoreError,
    EqualityFilter,
    SortDirection,
    StoredDocument,
)

logger = get_logger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _mask(s: str, keep: int = 6) -> str:
    if not s:
        return ""
    if len(s) <= keep:
        return "*" * len(s)
    return f"{s[:keep]}***"


def service_account_info(settings: Settings) -> dict[str, str]:
    """Build the service-account mapping expected by ``credentials.Certificate``."""
    return {
        "type": "service_account",
        "project_id": settings.firebase_project_id,
        "client_email": settings.firebase_client_email,
        "private_key": settings.firebase_private_key,
        "token_uri": GOOGLE_TOKEN_URI,
    }


class FirestoreDocumentStore(DocumentStore):
    """Document store backed by Cloud Firestore's async client."""

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        """Create the adapter.

        Args:
            settings: Application settings with Firebase credentials.
            client: Optional pre-built ``AsyncClient`` (tests inject a mock);
                when given, ``initialize`` does not touch firebase_admin.
        """
        self._settings = settings
        self._client = client
        self._app: firebase_admin.App | None = None

    @property
    def client(self) -> Any:
        if self._client is None:
            raise DocumentStoreError("Firestore client is not initialized")
        return self._client

    async def initialize(self) -> None:
        if self._client is not None:
            return

        logger.info(
            "Initializing Firestore document store",
            extra={
                "project_id": self._settings.firebase_project_id,
                "client_email": _mask(self._settings.firebase_client_email),
            },
        )
        credential = credentials.Certificate(service_account_info(self._settings))
        self._app = firebase_admin.initialize_app(
            credential,
            options={"projectId": self._settings.firebase_project_id},
            name=f"{self._settings.app_name}-firestore",
        )
        self._client = firestore_async.client(app=self._app)

    async def close(self) -> None:
        if self._app is not None:
            firebase_admin.delete_app(self._app)
            self._app = None
            self._client = None

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        payload = {**data, CREATED_AT_FIELD: SERVER_TIMESTAMP}
        try:
            _, doc_ref = await self.client.collection(collection).add(payload)
        except GoogleAPIError as exc:
            raise DocumentStoreError(
                f"Failed to add document: {exc}",
                operation="add",
                collection=collection,
            ) from exc
        return doc_ref.id

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        try:
            snapshot = await self.client.collection(collection).document(document_id).get()
        except GoogleAPIError as exc:
            raise DocumentStoreError(
                f"Failed to get document: {exc}",
                operation="get",
                collection=collection,
            ) from exc

        if not snapshot.exists:
            return None
        return StoredDocument(id=snapshot.id, data=snapshot.to_dict() or {})

    async def query(
        self,
        collection: str,
        filters: Sequence[EqualityFilter] = (),
        order_by: str | None = None,
        direction: SortDirection = SortDirection.DESCENDING,
        limit: int | None = None,
    ) -> list[StoredDocument]:
        query = self.client.collection(collection)
        for flt in filters:
            query = query.where(filter=FieldFilter(flt.field, "==", flt.value))
        if order_by is not None:
            query = query.order_by(order_by, direction=direction.value)
        if limit is not None:
            query = query.limit(limit)

        try:
            snapshots = await query.get()
        except GoogleAPIError as exc:
            raise DocumentStoreError(
                f"Failed to query documents: {exc}",
                operation="query",
                collection=collection,
            ) from exc

        return [
            StoredDocument(id=snapshot.id, data=snapshot.to_dict() or {})
            for snapshot in snapshots
        ]
