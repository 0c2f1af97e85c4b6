"""Base SQLModel for all database models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import text
from sqlalchemy.dialects.postgresql import UUID
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(UTC)


class BaseModel(SQLModel):
    """Base model with a UUID primary key.

    The server default relies on pgcrypto's gen_random_uuid(), created by the
    startup migration.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        sa_type=UUID(as_uuid=False),
        sa_column_kwargs={"server_default": text("gen_random_uuid()")},
    )
