"""User domain entities."""

from datetime import UTC, datetime

from pydantic import EmailStr, Field

from keydash.core.domain.base_entity import BaseEntity


def _utc_now() -> datetime:
    return datetime.now(UTC)


class User(BaseEntity):
    """A person who signed in through the identity provider."""

    email: EmailStr = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    first_login: datetime = Field(
        default_factory=_utc_now, description="First login time"
    )
    last_login: datetime = Field(
        default_factory=_utc_now, description="Last login time"
    )
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    def record_login(self, at: datetime | None = None) -> None:
        """Refresh the login timestamps for a returning user."""
        now = at or _utc_now()
        self.last_login = now
        self.updated_at = now
