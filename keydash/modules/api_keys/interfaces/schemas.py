"""API Key API schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from keydash.core.domain.exceptions import ValidationError


class ApiKeyWriteRequest(BaseModel):
    """Create/update API key request."""

    name: str | None = Field(
        None, description="Display name, at least 8 characters, no whitespace"
    )
    key: str | None = Field(
        None, description="Key value, starts with stan, at least 10 characters"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "my-agent-key",
                "key": "stan-Q3p9xv0LmA7cT2bR8nW4kY6sH1dJ5fGz",
            }
        }
    )

    @field_validator("name", "key")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return value.strip() if isinstance(value, str) else value

    def require_fields(self) -> tuple[str, str]:
        """Return (name, key) or raise when either is missing."""
        if not self.name or not self.key:
            raise ValidationError("Missing name or key")
        return self.name, self.key


class ApiKeyResponse(BaseModel):
    """API key record as shown on the dashboard."""

    id: str = Field(..., description="Key ID")
    name: str = Field(..., description="Display name")
    usage: int = Field(..., description="Uses so far")
    key: str = Field(..., description="Key value")


class GeneratedKeyResponse(BaseModel):
    key: str = Field(..., description="Freshly generated default key value")


class DeletedResponse(BaseModel):
    ok: bool = True


class ValidatedKeyData(BaseModel):
    """Key summary returned by a successful validation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    usage_count: int


class KeyValidationResponse(BaseModel):
    """Validation outcome; policy failures carry ``error``."""

    valid: bool
    message: str | None = None
    error: str | None = None
    data: ValidatedKeyData | None = None
