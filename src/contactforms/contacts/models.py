"""
Contact domain enumerations and document field names.
"""

from enum import Enum

from contactforms.shared.exceptions import InvalidWebsiteError


class Website(str, Enum):
    """Origin websites allowed to submit contact forms."""

    ALLINSYS = "allinsys"
    BLOODCASTED = "bloodcasted"
    PASSB2B = "passb2b"
    ABAVSP = "abavsp"

    @classmethod
    def parse(cls, tag: str) -> "Website":
        """Parse a raw website tag, raising InvalidWebsiteError if unknown."""
        try:
            return cls(tag)
        except ValueError:
            raise InvalidWebsiteError(tag) from None


class ContactSource(str, Enum):
    """How the contact found out about the service."""

    FEIRA = "feira"
    INTERNET = "internet"
    INDICACAO = "indicacao"
    OUTROS = "outros"
    WEBSITES = "websites"


# Document field names (camelCase, as stored)
EMAIL_FIELD = "email"
PHONE_FIELD = "phone"
WEBSITE_FIELD = "website"
SOURCE_FIELD = "source"
