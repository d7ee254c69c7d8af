"""Domain exceptions for the Clientele application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class ClienteleException(Exception):
    """Base exception for all Clientele application errors.

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
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ClienteleException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: str = "VALIDATION_ERROR",
    ) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            error_code: Machine-readable code; subclasses narrow it.
        """
        details = {"field": field} if field else {}
        super().__init__(message, error_code, details)


class EmailAlreadyExistsException(ValidationException):
    """Raised when registering or updating a client to an email that is already taken."""

    def __init__(self) -> None:
        """Initialize with a generic message (the email itself is not echoed)."""
        super().__init__(
            "Email already exists",
            field="email",
            error_code="EMAIL_EXISTS",
        )


class AuthenticationException(ClienteleException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(ClienteleException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'client', 'media').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ClientNotFoundException(ResourceNotFoundException):
    """Raised when no client record matches the lookup key (id, email or social id)."""

    def __init__(self, lookup: str, key: str = "id") -> None:
        """Initialize with the lookup value and which key was used.

        Args:
            lookup: The value that was looked up.
            key: Lookup key ('id', 'email' or 'social_id').
        """
        super().__init__("client", lookup)
        self.details["lookup_key"] = key


class CredentialException(ClienteleException):
    """Raised when password hashing, verification or token signing fails."""

    def __init__(self, message: str = "Credential operation failed") -> None:
        super().__init__(message, "CREDENTIAL_ERROR")
