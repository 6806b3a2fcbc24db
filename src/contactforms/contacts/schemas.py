"""
Pydantic schemas for contact intake and listing.

Wire format is camelCase (``fullName``, ``createdAt``...); Python attributes
are snake_case.
"""

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from contactforms.contacts.models import ContactSource, Website

_http_url = TypeAdapter(HttpUrl)


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ContactCreate(CamelModel):
    """Contact form payload submitted by a website."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "fullName": "John Doe",
                "email": "john.doe@example.com",
                "phone": "+5511999999999",
                "objective": "I want to know more about your services",
                "source": "internet",
                "location": "São Paulo, SP",
                "feedback": "I found your website very informative",
                "businessName": "Acme Inc.",
                "linkedin": "https://www.linkedin.com/in/johndoe",
            }
        },
    )

    full_name: str = Field(..., min_length=1, max_length=100, description="Full name of the contact")
    email: EmailStr = Field(..., description="Email address")
    phone: str | None = Field(default=None, max_length=50, description="Phone number")
    objective: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Objective or purpose of the contact",
    )
    source: ContactSource | None = Field(
        default=None,
        description="How the contact found out about the service",
    )
    location: str | None = Field(default=None, max_length=100, description="Location of the contact")
    feedback: str | None = Field(
        default=None,
        max_length=500,
        description="Additional feedback from the contact",
    )
    business_name: str | None = Field(default=None, max_length=100, description="Name of the business")
    linkedin: str | None = Field(default=None, max_length=255, description="LinkedIn profile URL")

    @field_validator("phone", "location", "feedback", "business_name", "linkedin", mode="before")
    @classmethod
    def blank_is_none(cls, v: Any) -> Any:
        """Blank optional fields are treated as absent and never stored."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("linkedin")
    @classmethod
    def validate_linkedin(cls, v: str | None) -> str | None:
        """Require an http(s) URL but keep the value as submitted."""
        if v:
            try:
                _http_url.validate_python(v)
            except PydanticValidationError:
                raise ValueError("linkedin must be a valid http(s) URL") from None
        return v

    def to_document(self, website: Website) -> dict[str, Any]:
        """Serialize to the stored document shape (camelCase, no nulls)."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        data["website"] = website.value
        return data


class ContactResponse(CamelModel):
    """A persisted contact record.

    Documents are schemaless, so everything but ``id`` is tolerated missing.
    """

    id: str
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    objective: str | None = None
    source: str | None = None
    location: str | None = None
    feedback: str | None = None
    business_name: str | None = None
    linkedin: str | None = None
    website: str | None = None
    created_at: datetime | None = None


class ContactSubmitResponse(CamelModel):
    """Confirmation returned after a successful submission."""

    success: bool = True
    message: str = "Contact submitted successfully"
    id: str


class ContactListFilters(BaseModel):
    """Optional filters for the paginated listing."""

    website: Website | None = None
    source: ContactSource | None = None
    search: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("search", mode="before")
    @classmethod
    def blank_search_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_date_bound(cls, v: Any, info: ValidationInfo) -> Any:
        """Accept plain dates; a plain end date covers the whole day."""
        if v is None or v == "":
            return None
        if isinstance(v, str) and len(v.strip()) == 10:
            v = date.fromisoformat(v.strip())
        if isinstance(v, date) and not isinstance(v, datetime):
            bound = time.max if info.field_name == "end_date" else time.min
            return datetime.combine(v, bound, tzinfo=timezone.utc)
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_range(self) -> "ContactListFilters":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must be before or equal to endDate")
        return self

    def link_params(self) -> dict[str, str]:
        """Filters echoed into navigation links."""
        params: dict[str, str] = {}
        if self.website is not None:
            params["website"] = self.website.value
        if self.source is not None:
            params["source"] = self.source.value
        if self.search:
            params["search"] = self.search
        return params


class PaginationMeta(CamelModel):
    total_items: int
    item_count: int
    items_per_page: int
    total_pages: int
    current_page: int


class PaginationLinks(CamelModel):
    """Navigation links; empty string when not applicable."""

    first: str = ""
    previous: str = ""
    next: str = ""
    last: str = ""


class PaginatedContacts(CamelModel):
    items: list[ContactResponse]
    meta: PaginationMeta
    links: PaginationLinks
