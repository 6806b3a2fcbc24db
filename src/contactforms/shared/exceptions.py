"""
Shared application exceptions.

Each error carries a stable ``code`` and the HTTP status it maps to; the
handler registered in ``contactforms.main`` turns them into JSON responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional


@dataclass(eq=False)
class AppError(Exception):
    message: str = "Application error"
    details: Optional[dict[str, Any]] = None

    code: ClassVar[str] = "APP_ERROR"
    status_code: ClassVar[int] = 500

    def __str__(self) -> str:
        return self.message


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 400


class InvalidWebsiteError(ValidationError):
    code = "INVALID_WEBSITE"

    def __init__(self, website: str) -> None:
        super().__init__(
            message="Invalid website identifier",
            details={"website": website},
        )
        self.website = website


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409


class DuplicateFieldError(ConflictError):
    """A contact already uses the submitted email or phone."""

    code = "DUPLICATE_FIELD"

    def __init__(self, field: str, value: str) -> None:
        super().__init__(
            message=f"A contact with this {field} already exists",
            details={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class StoreUnavailableError(AppError):
    code = "STORE_UNAVAILABLE"
    status_code = 500
