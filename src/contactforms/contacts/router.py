"""
Contact API router.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, status
from pydantic import ValidationError as PydanticValidationError

from contactforms.config import get_settings
from contactforms.contacts.models import ContactSource, Website
from contactforms.contacts.repository import ContactRepository
from contactforms.contacts.schemas import (
    ContactCreate,
    ContactListFilters,
    ContactResponse,
    ContactSubmitResponse,
    PaginatedContacts,
)
from contactforms.contacts.service import MAX_PAGE_SIZE, ContactService
from contactforms.shared.exceptions import ValidationError
from contactforms.shared.logging import get_logger
from contactforms.store.factory import get_document_store
from contactforms.store.interface import DocumentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])

_WEBSITE_DESCRIPTION = "Website identifier (" + ", ".join(w.value for w in Website) + ")"


def get_contact_service(
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> ContactService:
    """Dependency for contact service."""
    repository = ContactRepository(store, collection=get_settings().contacts_collection)
    return ContactService(repository)


@router.post(
    "/{website}",
    response_model=ContactSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a contact",
    responses={
        400: {"description": "Invalid website identifier or data."},
        409: {"description": "A contact with this email or phone already exists."},
        500: {"description": "Internal server error."},
    },
)
async def create_contact(
    website: Annotated[str, Path(description=_WEBSITE_DESCRIPTION, examples=["allinsys"])],
    payload: ContactCreate,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> ContactSubmitResponse:
    """Submit a contact form on behalf of a website."""
    return await service.submit(payload, Website.parse(website))


@router.get(
    "",
    response_model=PaginatedContacts,
    summary="List contacts",
    description="Paginated list of contacts, newest first.",
)
async def list_contacts(
    request: Request,
    service: Annotated[ContactService, Depends(get_contact_service)],
    page: Annotated[int, Query(ge=1, description="Page number (starts at 1)")] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Items per page")] = 10,
    website: Annotated[str | None, Query(description=_WEBSITE_DESCRIPTION)] = None,
    source: Annotated[ContactSource | None, Query()] = None,
    search: Annotated[
        str | None,
        Query(description="Search by name, email or business name"),
    ] = None,
    start_date: Annotated[
        str | None,
        Query(alias="startDate", description="Inclusive lower bound on createdAt (ISO-8601)"),
    ] = None,
    end_date: Annotated[
        str | None,
        Query(alias="endDate", description="Inclusive upper bound on createdAt (ISO-8601)"),
    ] = None,
) -> PaginatedContacts:
    parsed_website = Website.parse(website) if website else None
    try:
        filters = ContactListFilters(
            website=parsed_website,
            source=source,
            search=search,
            start_date=start_date,
            end_date=end_date,
        )
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid list filters",
            details={
                "errors": [
                    {"field": ".".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
                    for err in exc.errors()
                ]
            },
        ) from exc

    return await service.list_contacts(
        page=page,
        limit=limit,
        filters=filters,
        base_url=request.url.path,
    )


@router.get(
    "/website/{website}",
    response_model=list[ContactResponse],
    summary="List contacts of a website",
    description="All contacts submitted by one website, newest first.",
)
async def list_contacts_by_website(
    website: Annotated[str, Path(description=_WEBSITE_DESCRIPTION)],
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> list[ContactResponse]:
    return await service.list_by_website(Website.parse(website))


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    summary="Get contact details",
    responses={404: {"description": "Contact not found."}},
)
async def get_contact(
    contact_id: str,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> ContactResponse:
    return await service.get_contact(contact_id)
