"""
Contact repository over the document store.
"""

from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from contactforms.contacts.models import (
    EMAIL_FIELD,
    PHONE_FIELD,
    SOURCE_FIELD,
    WEBSITE_FIELD,
    ContactSource,
    Website,
)
from contactforms.contacts.schemas import ContactResponse
from contactforms.store.interface import (
    CREATED_AT_FIELD,
    DocumentStore,
    DocumentStoreError,
    EqualityFilter,
    SortDirection,
    StoredDocument,
)

DEFAULT_COLLECTION = "contactForms"


class ContactRepository:
    """Repository for contact documents in a single collection."""

    def __init__(self, store: DocumentStore, collection: str = DEFAULT_COLLECTION) -> None:
        """Initialize repository.

        Args:
            store: Initialized document store.
            collection: Collection holding contact submissions.
        """
        self._store = store
        self._collection = collection

    @property
    def collection(self) -> str:
        return self._collection

    async def email_exists(self, email: str) -> bool:
        return await self._store.exists(self._collection, EMAIL_FIELD, email)

    async def phone_exists(self, phone: str) -> bool:
        return await self._store.exists(self._collection, PHONE_FIELD, phone)

    async def create(self, data: Mapping[str, Any]) -> str:
        """Persist a contact document.

        Args:
            data: Document fields; the store adds ``createdAt``.

        Returns:
            Store-assigned identifier.
        """
        return await self._store.add(self._collection, data)

    async def get_by_id(self, contact_id: str) -> ContactResponse | None:
        doc = await self._store.get(self._collection, contact_id)
        return self._to_contact(doc) if doc is not None else None

    async def list_ordered(
        self,
        website: Website | None = None,
        source: ContactSource | None = None,
    ) -> list[ContactResponse]:
        """All contacts matching the equality filters, newest first.

        Args:
            website: Optional exact website filter.
            source: Optional exact source filter.

        Returns:
            Contacts ordered by createdAt descending.
        """
        filters: list[EqualityFilter] = []
        if website is not None:
            filters.append(EqualityFilter(field=WEBSITE_FIELD, value=website.value))
        if source is not None:
            filters.append(EqualityFilter(field=SOURCE_FIELD, value=source.value))

        docs = await self._store.query(
            self._collection,
            filters=filters,
            order_by=CREATED_AT_FIELD,
            direction=SortDirection.DESCENDING,
        )
        return [self._to_contact(doc) for doc in docs]

    def _to_contact(self, doc: StoredDocument) -> ContactResponse:
        try:
            return ContactResponse.model_validate({**doc.data, "id": doc.id})
        except PydanticValidationError as exc:
            raise DocumentStoreError(
                f"Stored document {doc.id} does not match the contact schema: {exc}",
                operation="read",
                collection=self._collection,
            ) from exc
