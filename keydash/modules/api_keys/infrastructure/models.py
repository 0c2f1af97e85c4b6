"""API Key database models."""

from sqlalchemy import Column, ForeignKey, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlmodel import Field

from keydash.core.infrastructure.database.base_model import BaseModel


class ApiKeyModel(BaseModel, table=True):
    """API Key database model."""

    __tablename__ = "user_keys"

    name: str = Field(sa_type=Text, nullable=False)
    usage_count: int = Field(
        default=0,
        nullable=False,
        sa_column_kwargs={"server_default": text("0")},
    )
    key_value: str = Field(sa_type=Text, nullable=False, unique=True, index=True)
    user_id: str = Field(
        sa_column=Column(
            UUID(as_uuid=False),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
