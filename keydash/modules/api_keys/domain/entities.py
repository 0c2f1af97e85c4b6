"""API Key domain entities."""

from pydantic import Field

from keydash.core.domain.base_entity import BaseEntity

KEY_PREFIX = "stan"
MIN_KEY_LENGTH = 10
MIN_NAME_LENGTH = 8
# A key stops working once it has been used this many times.
USAGE_LIMIT = 10


class ApiKey(BaseEntity):
    """An API key owned by a single user."""

    user_id: str = Field(..., description="Owning user id")
    name: str = Field(..., description="Display name")
    key_value: str = Field(..., description="Raw key value, unique across users")
    usage_count: int = Field(default=0, ge=0, description="Uses so far")

    @property
    def is_active(self) -> bool:
        """Active keys are below the usage limit."""
        return self.usage_count < USAGE_LIMIT

    def change(self, name: str, key_value: str) -> bool:
        """Apply an edit. Returns whether the key value changed."""
        value_changed = key_value != self.key_value
        self.name = name
        self.key_value = key_value
        return value_changed
