"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Each class carries a stable error code returned to clients.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict | None = None,
        code: str = "VAL_VALIDATION_ERROR",
    ) -> None:
        self.details = details or {}
        super().__init__(message, code=code)


class InvalidIdentifierError(ValidationError):
    """Raised when a malformed record identifier is supplied."""

    def __init__(self, message: str = "Invalid ID") -> None:
        super().__init__(message, code="VAL_INVALID_ID")


class MalformedIdentityError(ValidationError):
    """Raised when Telegram initData lacks a usable embedded user."""

    def __init__(self, message: str = "Malformed identity payload") -> None:
        super().__init__(message, code="VAL_IDENTITY_MALFORMED")


class AuthenticationError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Authentication required",
        code: str = "AUTH_UNAUTHORIZED",
    ) -> None:
        super().__init__(message, code=code)


class SignatureInvalidError(AuthenticationError):
    """Raised when initData was not signed by a trusted bot token."""

    def __init__(self, message: str = "Invalid Telegram data") -> None:
        super().__init__(message, code="AUTH_SIGNATURE_INVALID")


class AuthorizationError(ApplicationError):
    """Raised when authorization fails."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class CapacityExceededError(ApplicationError):
    """Raised when a gallery has reached its photo limit."""

    def __init__(self, message: str = "Gallery limit reached") -> None:
        super().__init__(message, code="RES_CAPACITY_EXCEEDED")


class ExternalServiceError(ApplicationError):
    """Raised when an external service call fails."""

    def __init__(
        self,
        message: str = "External service error",
        code: str = "SYS_EXTERNAL_SERVICE_ERROR",
    ) -> None:
        super().__init__(message, code=code)


class StorageProviderError(ExternalServiceError):
    """Raised when the media storage backend fails an upload or delete."""

    def __init__(self, message: str = "Storage provider error") -> None:
        super().__init__(message, code="SYS_STORAGE_PROVIDER_ERROR")


class ConfigurationError(ApplicationError):
    """Raised at startup when configuration cannot produce a working app."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="SYS_CONFIGURATION_ERROR")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
