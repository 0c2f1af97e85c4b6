"""Base domain exceptions.

All domain errors derive from DomainException. Subclasses pick the HTTP
response through the ``http_status_code`` and ``error_code`` class attributes,
so modules can add errors without touching the HTTP layer.
"""

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors.

    Subclasses may override:
    - http_status_code: HTTP status code (default 400)
    - error_code: machine readable error code (default "DOMAIN_ERROR")
    """

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when an entity is missing or not owned by the caller."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str | None = None):
        message = f"{entity_type} not found"
        if entity_id:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)


class ConflictError(DomainException):
    """Raised when a value that must be unique is already taken."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "CONFLICT"


class ValidationError(DomainException):
    """Raised when validation fails."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"


class AuthenticationError(DomainException):
    """Raised when the caller cannot be authenticated."""

    http_status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class UpstreamServiceError(DomainException):
    """Raised when an external service (GitHub, LLM) fails."""

    http_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "UPSTREAM_ERROR"


class InternalError(DomainException):
    """Raised for unexpected failures that must not leak details."""

    http_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
