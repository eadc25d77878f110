"""
Domain exceptions.

Services raise these; the handlers registered in app.main turn them into
JSON responses carrying `detail` and `error_code`.
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "ItemNotFoundError",
    "AlreadyExistsError",
    "BusinessValidationError",
    "InvalidStatusError",
    "InvalidAmountError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "StorageError",
]


class AppException(Exception):
    """
    Base exception for the application.

    Attributes:
        status_code: HTTP status code returned to the client
        error_code: Stable identifier of the error for API consumers
        detail: Human readable message
        extra: Optional additional data for the client
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_detail: str = "Internal server error"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.detail = detail if detail is not None else self.default_detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        super().__init__(self.detail)


class NotFoundError(AppException):
    """A user, client or invoice does not exist under the given owner."""

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"
    default_detail = "Resource not found"


class ItemNotFoundError(NotFoundError):
    """An invoice update references an item id the invoice does not have."""

    error_code = "INVOICE_ITEM_NOT_FOUND"
    default_detail = "Invoice item not found"

    def __init__(self, item_id: int, invoice_id: Optional[int] = None) -> None:
        self.item_id = item_id
        self.invoice_id = invoice_id
        super().__init__(
            f"Invoice item with ID {item_id} not found",
            extra={"item_id": item_id},
        )


class AlreadyExistsError(AppException):
    """Uniqueness collision (email in use by an active user, invoice number)."""

    status_code = 409
    error_code = "ALREADY_EXISTS"
    default_detail = "Resource already exists"


class BusinessValidationError(ValueError, AppException):
    """
    A business rule was violated.

    Not to be confused with pydantic.ValidationError, which covers the
    shape of the incoming payload.
    """

    status_code = 422
    error_code = "BUSINESS_VALIDATION_ERROR"
    default_detail = "Validation failed"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        AppException.__init__(self, detail, error_code, extra)


class InvalidStatusError(BusinessValidationError):
    """Requested invoice status is not one of the recognised literals."""

    error_code = "INVALID_STATUS"
    default_detail = "Invalid invoice status"


class InvalidAmountError(BusinessValidationError):
    """A computed monetary amount came out negative."""

    error_code = "INVALID_AMOUNT"
    default_detail = "Monetary amounts cannot be negative"


class InvalidCredentialsError(AppException):
    """Email/password pair does not match an active account."""

    status_code = 401
    error_code = "INVALID_CREDENTIALS"
    default_detail = "Invalid credentials"


class InvalidTokenError(AppException):
    """Bearer or refresh token is missing, malformed, expired or of the wrong type."""

    status_code = 401
    error_code = "INVALID_TOKEN"
    default_detail = "Invalid or expired token"


class StorageError(AppException):
    """Opaque failure of the storage layer."""

    status_code = 500
    error_code = "STORAGE_FAILURE"
    default_detail = "The request could not be completed, please retry later"
