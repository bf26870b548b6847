"""Domain error classes.

Protocol-agnostic errors that represent marketplace failures.
These errors are translated to HTTP responses by the entrypoint layer.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Contains business error information that can be translated
    to any protocol (HTTP today).
    """

    # Default error code (can be used as i18n key)
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message (default locale)
            **context: Additional context for error (e.g., listing id, field names)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Business rule validation error.

    Raised when a listing form, a filter or paging parameters fail their rules.
    Carries one entry per failing field so the client can render the message
    next to the field.

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "year", "message": "Invalid year."}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def field_messages(self) -> dict[str, str]:
        """Field name -> message mapping, as shown next to each form field."""
        return {error["field"]: error["message"] for error in self.errors or []}

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class FilterValidationError(ValidationError):
    """Raised when filter parameters are invalid."""


class PagingValidationError(ValidationError):
    """Raised when a pagination cursor or limit is invalid."""


class NotFoundError(DomainError):
    """Resource not found.

    Examples:
        - Listing with ID not found
        - User not found

    Protocol mappings:
        - REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        """Create a not found error.

        Args:
            resource: Type of resource (e.g., "Listing", "User")
            identifier: Resource identifier
            **context: Additional context
        """
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class ConflictError(DomainError):
    """Business constraint conflict (e.g. email already registered).

    Protocol mappings:
        - REST: 409 Conflict
    """

    error_code: str = "CONFLICT"


class UnauthorizedError(DomainError):
    """Authentication required or failed.

    Protocol mappings:
        - REST: 401 Unauthorized
    """

    error_code: str = "UNAUTHORIZED"


class ForbiddenError(DomainError):
    """Authenticated but not allowed to act on the resource.

    Raised when a user tries to edit or delete a listing they do not own.

    Protocol mappings:
        - REST: 403 Forbidden
    """

    error_code: str = "FORBIDDEN"


class UploadFailedError(DomainError):
    """One or more images could not be stored in the blob store.

    Protocol mappings:
        - REST: 502 Bad Gateway
    """

    error_code: str = "UPLOAD_FAILED"


class QueryFailedError(DomainError):
    """The document store rejected or failed a listing query.

    Typical cause is a missing index for a predicate + sort combination.

    Protocol mappings:
        - REST: 503 Service Unavailable
    """

    error_code: str = "QUERY_FAILED"

    def __init__(self, message: str = "Could not fetch listings", **context: Any) -> None:
        super().__init__(message, **context)


class InternalError(DomainError):
    """Internal domain error (unexpected conditions).

    Should be logged for investigation.

    Protocol mappings:
        - REST: 500 Internal Server Error
    """

    error_code: str = "INTERNAL_ERROR"
