"""
In-memory filtering and pagination of contact listings.

The store only handles equality filters and ordering; free-text search and
date ranges are applied here over the full candidate set. Fine for the
volumes a handful of marketing sites produce, but every listing reads the
whole (filtered) collection.
"""

import math
from collections.abc import Sequence
from datetime import datetime
from urllib.parse import urlencode

from contactforms.contacts.schemas import (
    ContactResponse,
    PaginationLinks,
    PaginationMeta,
)


def _matches_search(contact: ContactResponse, needle: str) -> bool:
    for value in (contact.full_name, contact.email, contact.business_name):
        if value and needle in value.lower():
            return True
    return False


def filter_contacts(
    contacts: Sequence[ContactResponse],
    search: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[ContactResponse]:
    """Apply search and inclusive date bounds, preserving order.

    Args:
        contacts: Candidates, already ordered.
        search: Case-insensitive substring matched against fullName, email
            and businessName.
        start_date: Inclusive lower bound on createdAt.
        end_date: Inclusive upper bound on createdAt.

    Returns:
        Matching contacts in their original order.
    """
    needle = search.lower() if search else None
    result: list[ContactResponse] = []

    for contact in contacts:
        if needle and not _matches_search(contact, needle):
            continue
        if start_date or end_date:
            created_at = contact.created_at
            if created_at is None:
                continue
            if start_date and created_at < start_date:
                continue
            if end_date and created_at > end_date:
                continue
        result.append(contact)

    return result


def paginate(
    items: Sequence[ContactResponse],
    page: int,
    limit: int,
) -> tuple[list[ContactResponse], PaginationMeta]:
    """Slice ``items`` into the requested page and compute metadata."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")

    total_items = len(items)
    total_pages = math.ceil(total_items / limit)
    start = (page - 1) * limit
    page_items = list(items[start:start + limit])

    meta = PaginationMeta(
        total_items=total_items,
        item_count=len(page_items),
        items_per_page=limit,
        total_pages=total_pages,
        current_page=page,
    )
    return page_items, meta


def build_links(
    base_url: str,
    page: int,
    limit: int,
    total_pages: int,
    params: dict[str, str] | None = None,
) -> PaginationLinks:
    """Build first/previous/next/last links for a page.

    ``first``/``previous`` exist only past page 1, ``next``/``last`` only
    before the last page.
    """
    extra = params or {}

    def link(target: int) -> str:
        query = urlencode({"page": target, "limit": limit, **extra})
        return f"{base_url}?{query}"

    links = PaginationLinks()
    if page > 1:
        links.first = link(1)
        links.previous = link(page - 1)
    if page < total_pages:
        links.next = link(page + 1)
        links.last = link(total_pages)
    return links
