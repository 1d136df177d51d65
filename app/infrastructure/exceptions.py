"""Infrastructure exceptions for document store operations.

Store errors extend HousingException so presentation can map them
to HTTP responses consistently. The REST client raises them after
classifying the HTTP status; callers propagate them unwrapped.
"""

from app.domain.exceptions import HousingException


class StoreException(HousingException):
    """Base exception for document store operations (unclassified: Unknown)."""

    def __init__(
        self,
        message: str = "Document store request failed",
        error_code: str = "STORE_ERROR",
        status_code: int | None = None,
    ) -> None:
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, error_code, details)
        self.status_code = status_code


class PermissionDeniedError(StoreException):
    """The store refused the request for lack of rights (HTTP 403)."""

    def __init__(self, message: str = "Permission denied by the document store") -> None:
        super().__init__(message, "PERMISSION_DENIED", 403)


class UnauthenticatedError(StoreException):
    """The store did not accept the credentials (HTTP 401)."""

    def __init__(self, message: str = "Document store authentication failed") -> None:
        super().__init__(message, "UNAUTHENTICATED", 401)


class UnavailableError(StoreException):
    """Transient unreachability (network failure, 429, 5xx). Retry is appropriate."""

    def __init__(
        self,
        message: str = "Document store temporarily unavailable",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, "UNAVAILABLE", status_code)


class PreconditionFailedError(StoreException):
    """Backend configuration issue (FAILED_PRECONDITION, or store not configured)."""

    def __init__(
        self,
        message: str = "Document store is not correctly configured",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, "PRECONDITION_FAILED", status_code)


class DocumentNotFoundError(StoreException):
    """Update targeted a document that does not exist (HTTP 404)."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Document not found: {path}", "RESOURCE_NOT_FOUND", 404)
        self.details["path"] = path


class DocumentExistsError(StoreException):
    """Create with an explicit id returned 409 (document id already exists)."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Document already exists: {path}", "DOCUMENT_EXISTS", 409)
        self.details["path"] = path
