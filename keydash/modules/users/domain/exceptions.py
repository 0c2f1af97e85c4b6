"""User domain exceptions."""

from keydash.core.domain.exceptions import EntityNotFoundError


class UserNotFoundError(EntityNotFoundError):
    """Raised when the session identity has no user record."""

    error_code = "USER_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__("User")
