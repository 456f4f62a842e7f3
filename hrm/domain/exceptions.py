"""Domain exceptions for the HRM lifecycle service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class HrmException(Exception):
    """Base exception for all HRM lifecycle errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

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
        """Return the JSON body used by the API error handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(HrmException):
    """Raised when input validation fails (missing field, bad range, unknown reference)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize with message, optional field name and field-level errors.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            errors: Optional list of {"field": ..., "message": ...} items.
        """
        details: dict[str, Any] = {"field": field} if field else {}
        if errors:
            details["errors"] = errors
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthorizationException(HrmException):
    """Raised when the actor lacks the permission for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'onboarding', 'checklist').
            action: Optional action that was attempted (e.g. 'create', 'cancel').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(HrmException):
    """Raised when a requested case, task, checklist or subject is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'case', 'task').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidStateException(HrmException):
    """Raised when a status transition is not allowed from the current status.

    Carries the current status so callers can reconcile their view.
    """

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        current_status: str,
        requested: str,
    ) -> None:
        """Initialize with the resource, its current status and the requested target.

        Args:
            resource_type: Type of resource (e.g. 'case').
            resource_id: Resource id.
            current_status: Status the resource is in now.
            requested: Requested status or action.
        """
        super().__init__(
            f"Cannot move {resource_type} {resource_id} from '{current_status}' to '{requested}'",
            "INVALID_STATE",
            {
                "resource_type": resource_type,
                "resource_id": resource_id,
                "current_status": current_status,
                "requested": requested,
            },
        )


class DuplicateOpenCaseException(ValidationException):
    """Raised when a subject already has an open case of the same kind.

    A validation failure on subject_id with its own error code (409).
    """

    def __init__(self, subject_id: str, kind: str, open_case_id: str) -> None:
        """Initialize with the subject, case kind and the already-open case.

        Args:
            subject_id: Subject that already has an open case.
            kind: Case kind ('onboarding' or 'offboarding').
            open_case_id: Id of the existing open case.
        """
        HrmException.__init__(
            self,
            f"Subject {subject_id} already has an open {kind} case",
            "DUPLICATE_OPEN_CASE",
            {
                "field": "subject_id",
                "subject_id": subject_id,
                "kind": kind,
                "open_case_id": open_case_id,
            },
        )


class PersistenceException(HrmException):
    """Raised when a database write or read fails (transaction or constraint error).

    The message is generic; internal detail is logged, not returned.
    """

    def __init__(self, operation: str) -> None:
        """Initialize with the failed operation name.

        Args:
            operation: Repository operation that failed (e.g. 'create_case').
        """
        super().__init__(
            "The operation could not be completed. Please retry.",
            "PERSISTENCE_ERROR",
            {"operation": operation},
        )


class SqlNotConfiguredException(HrmException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
