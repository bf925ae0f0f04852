"""Custom exception classes for Pagecraft."""


class PagecraftError(Exception):
    """Base exception for all Pagecraft errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 500,
        details: dict | None = None,
    ):
        """Initialize PagecraftError.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            status_code: HTTP status code for API responses.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.status_code = status_code
        self.details = details or {}


class NotFoundError(PagecraftError):
    """Raised when a component (or other resource) does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message=message or f"{resource_type} with ID '{resource_id}' not found",
            error_code="NOT_FOUND",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ValidationError(PagecraftError):
    """Raised when request bodies or host-supplied markup fail validation."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[dict] | None = None,
    ):
        """Initialize ValidationError.

        Args:
            message: Error message.
            errors: List of validation errors with field and message.
        """
        self.errors = errors or []
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"errors": self.errors},
        )


class ForbiddenError(PagecraftError):
    """Raised when the caller cannot touch the requested workspace."""

    def __init__(
        self,
        message: str = "You don't have permission to perform this action",
        resource_type: str | None = None,
        action: str | None = None,
    ):
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if action:
            details["action"] = action

        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=403,
            details=details if details else None,
        )


class ConflictError(PagecraftError):
    """Raised on optimistic lock failures or duplicate component IDs."""

    def __init__(
        self,
        message: str = "Resource conflict",
        conflict_type: str | None = None,
    ):
        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=409,
            details={"conflict_type": conflict_type} if conflict_type else None,
        )


class PersistenceError(PagecraftError):
    """Raised when edited markup could not be written back to the component store."""

    def __init__(
        self,
        component_id: str,
        message: str | None = None,
        original_error: str | None = None,
    ):
        """Initialize PersistenceError.

        Args:
            component_id: Component whose content could not be saved.
            message: Optional custom message.
            original_error: Text of the underlying failure, if any.
        """
        self.component_id = component_id
        super().__init__(
            message=message or f"Component '{component_id}' could not be saved",
            error_code="PERSISTENCE_FAILED",
            status_code=502,
            details={
                "component_id": component_id,
                "original_error": original_error,
            },
        )
