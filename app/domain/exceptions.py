"""Domain exceptions for the worker housing service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class HousingException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class so that handlers and
    callers can classify them consistently.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the API."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(HousingException):
    """Raised when input validation fails locally, before any store call."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthorizationException(HousingException):
    """Raised when the caller's scope does not allow the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(HousingException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'site', 'room').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class PartialCascadeFailureException(HousingException):
    """Raised when a site cascade stops on a room deletion failure.

    The site document is left in place. Rooms already deleted stay deleted;
    the remaining ones are listed so the caller can retry the whole cascade.
    """

    def __init__(
        self,
        site_id: str,
        deleted_room_ids: list[str],
        remaining_room_ids: list[str],
        failed_room_id: str,
        reason: str,
    ) -> None:
        super().__init__(
            f"Site {site_id} was not deleted: room {failed_room_id} could not be deleted",
            "PARTIAL_CASCADE_FAILURE",
            {
                "site_id": site_id,
                "deleted_room_ids": deleted_room_ids,
                "remaining_room_ids": remaining_room_ids,
                "failed_room_id": failed_room_id,
                "reason": reason,
            },
        )
        self.site_id = site_id
        self.deleted_room_ids = deleted_room_ids
        self.remaining_room_ids = remaining_room_ids
        self.failed_room_id = failed_room_id


class RecalculationFailureException(HousingException):
    """Raised when a site's aggregate counters could not be rewritten.

    When recalculation runs as a side effect of a room mutation the engine
    converts this into a warning on the (successful) room result.
    """

    def __init__(self, site_id: str, reason: str) -> None:
        super().__init__(
            f"Capacity recalculation failed for site {site_id}",
            "RECALCULATION_FAILED",
            {"site_id": site_id, "reason": reason},
        )
        self.site_id = site_id


class MalformedDocumentException(HousingException):
    """Raised when a stored document cannot be read as its entity.

    Listings skip such documents; single-document reads report them so the
    caller learns why the resource cannot be shown or edited.
    """

    def __init__(self, resource_type: str, resource_id: str, reason: str) -> None:
        super().__init__(
            f"Stored {resource_type} {resource_id} is malformed",
            "MALFORMED_DOCUMENT",
            {"resource_type": resource_type, "resource_id": resource_id, "reason": reason},
        )
