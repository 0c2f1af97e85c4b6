"""API key policy rules.

Pure functions shared by every entry point that accepts a key or a key name.
Validation runs format -> existence/ownership -> active state, and each stage
short-circuits so the caller gets the most specific error first.
"""

import secrets
import string
from dataclasses import dataclass
from enum import StrEnum

from keydash.modules.api_keys.domain.entities import (
    KEY_PREFIX,
    MIN_KEY_LENGTH,
    MIN_NAME_LENGTH,
    USAGE_LIMIT,
    ApiKey,
)
from keydash.modules.api_keys.domain.exceptions import InvalidKeyNameError

GENERATED_KEY_LENGTH = 32
_KEY_ALPHABET = string.ascii_letters + string.digits


class KeyValidationError(StrEnum):
    """Reasons a key can fail validation."""

    TOO_SHORT = "too_short"
    BAD_PREFIX = "bad_prefix"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[KeyValidationError, str] = {
    KeyValidationError.TOO_SHORT: (
        f"API key must be at least {MIN_KEY_LENGTH} characters long"
    ),
    KeyValidationError.BAD_PREFIX: f"API key must start with '{KEY_PREFIX}'",
    KeyValidationError.NOT_FOUND: "API key not found",
    KeyValidationError.INACTIVE: (
        f"API key is inactive: usage limit of {USAGE_LIMIT} reached"
    ),
}


@dataclass(frozen=True)
class KeyValidationResult:
    """Outcome of a key validation.

    ``key`` is attached on success and also on INACTIVE so callers can
    inspect the record.
    """

    valid: bool
    error: KeyValidationError | None = None
    key: ApiKey | None = None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    @classmethod
    def ok(cls, key: ApiKey | None = None) -> "KeyValidationResult":
        return cls(valid=True, key=key)

    @classmethod
    def failed(
        cls, error: KeyValidationError, key: ApiKey | None = None
    ) -> "KeyValidationResult":
        return cls(valid=False, error=error, key=key)


def validate_format(candidate: str) -> KeyValidationResult:
    """Check length and prefix. No database access."""
    if len(candidate) < MIN_KEY_LENGTH:
        return KeyValidationResult.failed(KeyValidationError.TOO_SHORT)
    if not candidate.startswith(KEY_PREFIX):
        return KeyValidationResult.failed(KeyValidationError.BAD_PREFIX)
    return KeyValidationResult.ok()


def check_active(key: ApiKey) -> KeyValidationResult:
    """Fail with INACTIVE once the key reached the usage limit."""
    if not key.is_active:
        return KeyValidationResult.failed(KeyValidationError.INACTIVE, key=key)
    return KeyValidationResult.ok(key)


def validate_name(name: str) -> str:
    """Return the trimmed name or raise InvalidKeyNameError."""
    trimmed = name.strip()
    if len(trimmed) < MIN_NAME_LENGTH:
        raise InvalidKeyNameError(
            f"Name must be at least {MIN_NAME_LENGTH} characters long"
        )
    if any(ch.isspace() for ch in trimmed):
        raise InvalidKeyNameError("Name cannot contain whitespaces")
    return trimmed


def generate_key_value() -> str:
    """Generate a default key value: ``stan-`` followed by random alphanumerics."""
    suffix = "".join(secrets.choice(_KEY_ALPHABET) for _ in range(GENERATED_KEY_LENGTH))
    return f"{KEY_PREFIX}-{suffix}"
