"""User database models."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Text, func
from sqlmodel import Field

from keydash.core.infrastructure.database.base_model import BaseModel, utc_now


def _timestamp_field() -> Any:
    return Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
        nullable=False,
    )


class UserModel(BaseModel, table=True):
    """User database model."""

    __tablename__ = "users"

    email: str = Field(sa_type=Text, index=True, nullable=False, unique=True)
    name: str = Field(sa_type=Text, nullable=False)
    first_login: datetime = _timestamp_field()
    last_login: datetime = _timestamp_field()
    created_at: datetime = _timestamp_field()
    updated_at: datetime = _timestamp_field()
