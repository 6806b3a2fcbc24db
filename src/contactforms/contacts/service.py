"""
Contact service: intake workflow and read operations.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from contactforms.contacts.models import Website
from contactforms.contacts.pagination import build_links, filter_contacts, paginate
from contactforms.contacts.repository import ContactRepository
from contactforms.contacts.schemas import (
    ContactCreate,
    ContactListFilters,
    ContactResponse,
    ContactSubmitResponse,
    PaginatedContacts,
)
from contactforms.shared.exceptions import (
    DuplicateFieldError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from contactforms.shared.logging import get_logger, log_with_context
from contactforms.store.interface import DocumentStoreError

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


class ContactService:
    """Service for contact intake and listing."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    @contextmanager
    def _store_call(self, operation: str, **context: Any) -> Iterator[None]:
        """Log store failures with context and surface them as StoreUnavailableError."""
        try:
            yield
        except DocumentStoreError as exc:
            logger.exception(
                "Document store call failed",
                extra={
                    "operation": operation,
                    "collection": self._repo.collection,
                    "store_operation": exc.operation,
                    **context,
                },
            )
            raise StoreUnavailableError(
                message="Failed to access contact storage",
                details={"operation": operation},
            ) from exc

    async def submit(
        self,
        form: ContactCreate,
        website: Website | str,
    ) -> ContactSubmitResponse:
        """Run the intake workflow for one submission.

        Duplicate check and insert are two separate store calls; concurrent
        submissions with the same email can both pass the check.

        Args:
            form: Validated form payload.
            website: Origin website tag.

        Returns:
            Confirmation with the new contact id.

        Raises:
            InvalidWebsiteError: If the tag is not in the allow-list.
            DuplicateFieldError: If email or phone is already registered.
            StoreUnavailableError: If the store call fails.
        """
        if not isinstance(website, Website):
            website = Website.parse(website)

        logger.info("Contact submission received", extra={"website": website.value})

        with self._store_call("submit", website=website.value):
            if await self._repo.email_exists(form.email):
                logger.warning(
                    "Duplicate contact rejected",
                    extra={"website": website.value, "duplicate_field": "email"},
                )
                raise DuplicateFieldError(field="email", value=form.email)

            if form.phone and await self._repo.phone_exists(form.phone):
                logger.warning(
                    "Duplicate contact rejected",
                    extra={"website": website.value, "duplicate_field": "phone"},
                )
                raise DuplicateFieldError(field="phone", value=form.phone)

            contact_id = await self._repo.create(form.to_document(website))

        log_with_context(
            logger,
            logging.INFO,
            "Contact created",
            contact_id=contact_id,
            website=website.value,
        )
        return ContactSubmitResponse(id=contact_id)

    async def list_contacts(
        self,
        page: int = 1,
        limit: int = 10,
        filters: ContactListFilters | None = None,
        base_url: str = "",
    ) -> PaginatedContacts:
        """Paginated, filtered listing, newest first.

        Args:
            page: Page number (1-indexed).
            limit: Items per page (1..100).
            filters: Optional website/source/search/date filters.
            base_url: Path prefixed to navigation links.

        Returns:
            Page of contacts with metadata and links.
        """
        if page < 1:
            raise ValidationError("page must be greater than or equal to 1")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

        filters = filters or ContactListFilters()

        with self._store_call(
            "list_contacts",
            website=filters.website.value if filters.website else None,
        ):
            candidates = await self._repo.list_ordered(
                website=filters.website,
                source=filters.source,
            )

        matched = filter_contacts(
            candidates,
            search=filters.search,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )
        items, meta = paginate(matched, page=page, limit=limit)
        links = build_links(
            base_url,
            page=page,
            limit=limit,
            total_pages=meta.total_pages,
            params=filters.link_params(),
        )
        return PaginatedContacts(items=items, meta=meta, links=links)

    async def get_contact(self, contact_id: str) -> ContactResponse:
        """Get a contact by id.

        Raises:
            NotFoundError: If no contact has this id.
        """
        with self._store_call("get_contact", contact_id=contact_id):
            contact = await self._repo.get_by_id(contact_id)

        if contact is None:
            raise NotFoundError(f"Contact {contact_id} not found")
        return contact

    async def list_by_website(self, website: Website | str) -> list[ContactResponse]:
        """All contacts of one website, newest first, unpaginated."""
        if not isinstance(website, Website):
            website = Website.parse(website)

        with self._store_call("list_by_website", website=website.value):
            return await self._repo.list_ordered(website=website)
