"""API Key application service."""

import uuid
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from loguru import logger

from keydash.core.infrastructure.logging import BusinessEvents
from keydash.modules.api_keys.domain import policy
from keydash.modules.api_keys.domain.entities import USAGE_LIMIT, ApiKey
from keydash.modules.api_keys.domain.exceptions import (
    ApiKeyInactiveError,
    ApiKeyInvalidError,
    ApiKeyNotFoundError,
    DuplicateApiKeyError,
    InvalidApiKeyFormatError,
)
from keydash.modules.api_keys.domain.policy import (
    KeyValidationError,
    KeyValidationResult,
)
from keydash.modules.api_keys.domain.repository import ApiKeyRepository


class ApiKeyService:
    """Application service for API key management and validation."""

    def __init__(
        self,
        repository: ApiKeyRepository,
        *,
        strict_usage_cap: bool = False,
    ) -> None:
        self._repo = repository
        self._strict_usage_cap = strict_usage_cap

    @staticmethod
    def _require_format(key_value: str) -> None:
        result = policy.validate_format(key_value)
        if not result.valid:
            raise InvalidApiKeyFormatError(result.message or "Invalid API key")

    @staticmethod
    def _require_key_id(key_id: str) -> None:
        # ids are UUIDs; anything else cannot match a row
        try:
            uuid.UUID(key_id)
        except ValueError:
            raise ApiKeyNotFoundError() from None

    async def _get_owned(self, key_id: str, user_id: str) -> ApiKey:
        self._require_key_id(key_id)
        api_key = await self._repo.get_for_owner(key_id, user_id)
        if api_key is None:
            raise ApiKeyNotFoundError()
        return api_key

    async def list_keys(self, user_id: str) -> list[ApiKey]:
        """List a user's keys ordered by name."""
        return await self._repo.list_by_user(user_id)

    async def exists_globally(
        self, key_value: str, exclude_id: str | None = None
    ) -> bool:
        """Check whether any user already holds this key value."""
        return await self._repo.exists_by_value(key_value, exclude_id=exclude_id)

    async def create_key(self, user_id: str, name: str, key_value: str) -> ApiKey:
        """Create a key for a user.

        Raises:
            InvalidKeyNameError: name too short or contains whitespace
            InvalidApiKeyFormatError: key too short or missing the prefix
            DuplicateApiKeyError: key value already exists for any user
        """
        name = policy.validate_name(name)
        self._require_format(key_value)
        if await self.exists_globally(key_value):
            raise DuplicateApiKeyError()

        created = await self._repo.create(
            ApiKey(user_id=user_id, name=name, key_value=key_value)
        )
        BusinessEvents.api_key_created(
            user_id=user_id, key_id=created.id, key_value=key_value
        )
        return created

    async def update_key(
        self, key_id: str, user_id: str, name: str, key_value: str
    ) -> ApiKey:
        """Edit a key's name and value.

        Raises:
            ApiKeyNotFoundError: no such key for this user
            ApiKeyInactiveError: the key is spent and therefore frozen
            DuplicateApiKeyError: the new value already exists
        """
        name = policy.validate_name(name)
        self._require_format(key_value)

        api_key = await self._get_owned(key_id, user_id)
        if not api_key.is_active:
            raise ApiKeyInactiveError(
                f"API key reached its usage limit of {USAGE_LIMIT} and can no "
                "longer be edited"
            )

        if key_value != api_key.key_value and await self.exists_globally(
            key_value, exclude_id=key_id
        ):
            raise DuplicateApiKeyError()

        value_changed = api_key.change(name=name, key_value=key_value)
        updated = await self._repo.update(api_key)
        BusinessEvents.api_key_updated(
            user_id=user_id, key_id=key_id, value_changed=value_changed
        )
        return updated

    async def delete_key(self, key_id: str, user_id: str) -> None:
        """Delete a key regardless of its usage.

        Raises:
            ApiKeyNotFoundError: no such key for this user
        """
        self._require_key_id(key_id)
        if not await self._repo.delete(key_id, user_id):
            raise ApiKeyNotFoundError()
        BusinessEvents.api_key_deleted(user_id=user_id, key_id=key_id)

    async def validate_for_use(
        self, candidate: str, user_id: str
    ) -> KeyValidationResult:
        """Check that a raw key may be spent by this user.

        Does not touch usage_count; callers decide when a use is billed.
        """
        result = policy.validate_format(candidate)
        if result.valid:
            api_key = await self._repo.get_by_value_for_owner(candidate, user_id)
            if api_key is None:
                result = KeyValidationResult.failed(KeyValidationError.NOT_FOUND)
            else:
                result = policy.check_active(api_key)

        if not result.valid and result.error is not None:
            BusinessEvents.api_key_rejected(
                key_value=candidate, reason=result.error.value, user_id=user_id
            )
        return result

    async def record_usage(self, key_value: str) -> int:
        """Bill one use of a key and return the new usage count.

        The default mode increments unconditionally after a separate
        validate_for_use, so concurrent requests can overshoot the cap.
        Strict mode refuses the increment for keys already at the cap.

        Raises:
            ApiKeyInvalidError: strict mode and the key is already spent, or
                the key disappeared since validation
        """
        cap = USAGE_LIMIT if self._strict_usage_cap else None
        new_count = await self._repo.increment_usage(key_value, cap=cap)
        if new_count is None:
            reason = (
                KeyValidationError.INACTIVE
                if self._strict_usage_cap
                else KeyValidationError.NOT_FOUND
            )
            logger.warning(f"Usage increment matched no key ({reason.value})")
            BusinessEvents.api_key_rejected(key_value=key_value, reason=reason.value)
            raise ApiKeyInvalidError(reason.message)

        BusinessEvents.api_key_usage_recorded(key_value=key_value, usage_count=new_count)
        return new_count

    async def validate_and_record(
        self, candidate: str, user_id: str
    ) -> tuple[ApiKey, int]:
        """Validate a key for this user and bill one use.

        Raises:
            ApiKeyInvalidError: the key may not be spent
        """
        result = await self.validate_for_use(candidate, user_id)
        if not result.valid or result.key is None:
            raise ApiKeyInvalidError(result.message or "Invalid API key")

        usage_count = await self.record_usage(candidate)
        BusinessEvents.api_key_validated(
            user_id=user_id, key_id=result.key.id, usage_count=usage_count
        )
        return result.key, usage_count

    @staticmethod
    def generate_key_value() -> str:
        return policy.generate_key_value()


# Opens a short transaction and hands out a service bound to it.
type ApiKeyServiceScope = Callable[[], AbstractAsyncContextManager[ApiKeyService]]
