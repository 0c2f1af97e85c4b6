"""API Key domain exceptions."""

from fastapi import status

from keydash.core.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)


class ApiKeyNotFoundError(EntityNotFoundError):
    """Raised when a key does not exist or belongs to someone else."""

    error_code = "API_KEY_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__("API key")


class ApiKeyInactiveError(ValidationError):
    """Raised when editing a key that reached its usage limit."""

    error_code = "API_KEY_INACTIVE"


class DuplicateApiKeyError(ConflictError):
    """Raised when the key value is already used by any user."""

    error_code = "DUPLICATE_API_KEY"

    def __init__(self) -> None:
        super().__init__("API key value already exists")


class InvalidApiKeyFormatError(ValidationError):
    """Raised when a submitted key value breaks the format rules."""

    error_code = "INVALID_API_KEY_FORMAT"


class InvalidKeyNameError(ValidationError):
    """Raised when a key name breaks the naming rules."""

    error_code = "INVALID_KEY_NAME"


class ApiKeyInvalidError(AuthenticationError):
    """Raised when a key presented for use fails validation."""

    http_status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "API_KEY_INVALID"
