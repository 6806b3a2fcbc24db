"""
Integration tests for the contact service (SQL document store, in-memory).
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from contactforms.contacts.models import ContactSource, Website
from contactforms.contacts.repository import ContactRepository
from contactforms.contacts.schemas import ContactCreate, ContactListFilters
from contactforms.contacts.service import ContactService
from contactforms.shared.exceptions import (
    DuplicateFieldError,
    InvalidWebsiteError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from contactforms.store.interface import DocumentStore, DocumentStoreError, StoredDocument
from contactforms.store.sql_adapter import SqlDocumentStore

from conftest import CLOCK_START, make_form


def _form(index: int = 0, **overrides) -> ContactCreate:
    return ContactCreate.model_validate(make_form(index, **overrides))


async def _seed(service: ContactService, count: int, website: Website, offset: int = 0, **overrides) -> list[str]:
    ids = []
    for i in range(offset, offset + count):
        result = await service.submit(_form(i, **overrides), website)
        ids.append(result.id)
    return ids


class TestContactServiceSubmit:
    @pytest.mark.asyncio
    async def test_submit_persists_contact(self, service: ContactService) -> None:
        form = _form(1, phone="+5511999999999", source="internet", businessName="Acme")

        result = await service.submit(form, Website.ALLINSYS)

        assert result.success is True
        assert result.message == "Contact submitted successfully"
        contact = await service.get_contact(result.id)
        assert contact.id == result.id
        assert contact.full_name == "Contact 1"
        assert contact.email == "contact1@example.com"
        assert contact.phone == "+5511999999999"
        assert contact.source == "internet"
        assert contact.business_name == "Acme"
        assert contact.website == "allinsys"
        assert contact.created_at == CLOCK_START

    @pytest.mark.asyncio
    async def test_submit_accepts_raw_tag(self, service: ContactService) -> None:
        result = await service.submit(_form(1), "abavsp")

        contact = await service.get_contact(result.id)
        assert contact.website == "abavsp"

    @pytest.mark.asyncio
    async def test_invalid_website_persists_nothing(
        self,
        service: ContactService,
        document_store: SqlDocumentStore,
    ) -> None:
        with pytest.raises(InvalidWebsiteError):
            await service.submit(_form(1), "unknown-site")

        assert await document_store.query("contactForms") == []

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_across_websites(
        self,
        service: ContactService,
        document_store: SqlDocumentStore,
    ) -> None:
        await service.submit(
            ContactCreate.model_validate({"fullName": "A", "email": "a@x.com", "objective": "hi"}),
            Website.ALLINSYS,
        )

        with pytest.raises(DuplicateFieldError) as exc_info:
            await service.submit(
                ContactCreate.model_validate(
                    {"fullName": "B", "email": "a@x.com", "objective": "other", "phone": "+1555"}
                ),
                Website.PASSB2B,
            )

        assert exc_info.value.field == "email"
        assert exc_info.value.value == "a@x.com"
        assert exc_info.value.status_code == 409
        assert len(await document_store.query("contactForms")) == 1

    @pytest.mark.asyncio
    async def test_duplicate_phone_rejected(self, service: ContactService) -> None:
        await service.submit(_form(1, phone="+5511999999999"), Website.ALLINSYS)

        with pytest.raises(DuplicateFieldError) as exc_info:
            await service.submit(_form(2, phone="+5511999999999"), Website.BLOODCASTED)

        assert exc_info.value.field == "phone"
        assert exc_info.value.details == {"field": "phone", "value": "+5511999999999"}

    @pytest.mark.asyncio
    async def test_email_checked_before_phone(self, service: ContactService) -> None:
        await service.submit(_form(1, phone="+111"), Website.ALLINSYS)

        with pytest.raises(DuplicateFieldError) as exc_info:
            await service.submit(_form(1, phone="+111"), Website.ALLINSYS)

        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_contacts_without_phone_do_not_collide(self, service: ContactService) -> None:
        first = await service.submit(_form(1), Website.ALLINSYS)
        second = await service.submit(_form(2), Website.ALLINSYS)

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_blank_phone_never_stored(
        self,
        service: ContactService,
        repository: ContactRepository,
    ) -> None:
        await service.submit(_form(1, phone=""), Website.ALLINSYS)
        await service.submit(_form(2, phone="   "), Website.PASSB2B)

        contacts = await repository.list_ordered()

        assert len(contacts) == 2
        assert [c.phone for c in contacts] == [None, None]
        assert not await repository.phone_exists("")

    @pytest.mark.asyncio
    async def test_store_failure_surfaces_as_unavailable(self) -> None:
        store = MagicMock(spec=DocumentStore)
        store.exists = AsyncMock(return_value=False)
        store.add = AsyncMock(side_effect=DocumentStoreError("write failed", operation="add"))
        service = ContactService(ContactRepository(store))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await service.submit(_form(1), Website.ALLINSYS)

        assert isinstance(exc_info.value.__cause__, DocumentStoreError)
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_duplicate_check_failure_never_inserts(self) -> None:
        store = MagicMock(spec=DocumentStore)
        store.exists = AsyncMock(side_effect=DocumentStoreError("read failed", operation="query"))
        store.add = AsyncMock()
        service = ContactService(ContactRepository(store))

        with pytest.raises(StoreUnavailableError):
            await service.submit(_form(1), Website.ALLINSYS)

        store.add.assert_not_awaited()


class TestContactServiceList:
    @pytest.mark.asyncio
    async def test_second_page_of_fifteen(self, service: ContactService) -> None:
        await _seed(service, 15, Website.ALLINSYS)
        await _seed(service, 3, Website.PASSB2B, offset=100)

        result = await service.list_contacts(
            page=2,
            limit=10,
            filters=ContactListFilters(website=Website.ALLINSYS),
            base_url="/contact",
        )

        assert len(result.items) == 5
        assert result.meta.total_items == 15
        assert result.meta.total_pages == 2
        assert result.meta.current_page == 2
        assert result.links.next == ""
        assert result.links.last == ""
        assert result.links.previous == "/contact?page=1&limit=10&website=allinsys"
        assert result.links.first == "/contact?page=1&limit=10&website=allinsys"
        assert all(c.website == "allinsys" for c in result.items)

    @pytest.mark.asyncio
    async def test_newest_first(self, service: ContactService) -> None:
        await _seed(service, 3, Website.ALLINSYS)

        result = await service.list_contacts()

        assert [c.full_name for c in result.items] == ["Contact 2", "Contact 1", "Contact 0"]

    @pytest.mark.asyncio
    async def test_page_past_end(self, service: ContactService) -> None:
        await _seed(service, 4, Website.ALLINSYS)

        result = await service.list_contacts(page=3, limit=2)

        assert result.items == []
        assert result.meta.total_items == 4
        assert result.meta.total_pages == 2
        assert result.links.next == ""
        assert result.links.last == ""

    @pytest.mark.asyncio
    async def test_empty_store(self, service: ContactService) -> None:
        result = await service.list_contacts()

        assert result.items == []
        assert result.meta.total_items == 0
        assert result.meta.total_pages == 0
        assert result.links.model_dump() == {"first": "", "previous": "", "next": "", "last": ""}

    @pytest.mark.asyncio
    async def test_source_and_search_filters(self, service: ContactService) -> None:
        await service.submit(_form(1, source="feira", businessName="Padaria Estrela"), Website.ALLINSYS)
        await service.submit(_form(2, source="feira"), Website.ALLINSYS)
        await service.submit(_form(3, source="internet", businessName="Estrela Tech"), Website.ALLINSYS)

        result = await service.list_contacts(
            filters=ContactListFilters(source=ContactSource.FEIRA, search="ESTRELA"),
        )

        assert [c.full_name for c in result.items] == ["Contact 1"]
        assert result.meta.total_items == 1

    @pytest.mark.asyncio
    async def test_date_range_filter(self, service: ContactService) -> None:
        await _seed(service, 5, Website.ALLINSYS)

        result = await service.list_contacts(
            filters=ContactListFilters(
                start_date=CLOCK_START + timedelta(minutes=1),
                end_date=CLOCK_START + timedelta(minutes=3),
            ),
        )

        assert [c.full_name for c in result.items] == ["Contact 3", "Contact 2", "Contact 1"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 101)])
    async def test_rejects_bad_paging(self, service: ContactService, page: int, limit: int) -> None:
        with pytest.raises(ValidationError):
            await service.list_contacts(page=page, limit=limit)

    @pytest.mark.asyncio
    async def test_store_failure(self) -> None:
        store = MagicMock(spec=DocumentStore)
        store.query = AsyncMock(side_effect=DocumentStoreError("query failed", operation="query"))
        service = ContactService(ContactRepository(store))

        with pytest.raises(StoreUnavailableError):
            await service.list_contacts()


class TestContactServiceLookup:
    @pytest.mark.asyncio
    async def test_get_missing(self, service: ContactService) -> None:
        with pytest.raises(NotFoundError):
            await service.get_contact("missing-id")

    @pytest.mark.asyncio
    async def test_list_by_website(self, service: ContactService) -> None:
        await _seed(service, 3, Website.ABAVSP)
        await _seed(service, 2, Website.PASSB2B, offset=10)

        first = await service.list_by_website(Website.ABAVSP)
        second = await service.list_by_website("abavsp")

        assert [c.full_name for c in first] == ["Contact 2", "Contact 1", "Contact 0"]
        assert first == second

    @pytest.mark.asyncio
    async def test_malformed_document_surfaces_as_unavailable(self) -> None:
        store = MagicMock(spec=DocumentStore)
        store.get = AsyncMock(return_value=StoredDocument(id="abc", data={"phone": 5511999999999}))
        store.query = AsyncMock(return_value=[StoredDocument(id="abc", data={"fullName": ["A"]})])
        service = ContactService(ContactRepository(store))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await service.get_contact("abc")
        assert isinstance(exc_info.value.__cause__, DocumentStoreError)
        assert exc_info.value.__cause__.operation == "read"

        with pytest.raises(StoreUnavailableError):
            await service.list_by_website(Website.ALLINSYS)

    @pytest.mark.asyncio
    async def test_list_by_website_rejects_unknown_tag(self, service: ContactService) -> None:
        with pytest.raises(InvalidWebsiteError):
            await service.list_by_website("nope")
