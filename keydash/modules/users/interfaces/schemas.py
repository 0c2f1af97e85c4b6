"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class SessionResponse(BaseModel):
    """Identity of the registered session."""

    email: str = Field(..., description="User email")
    name: str | None = Field(None, description="Display name")


class UserResponse(BaseModel):
    """User response."""

    id: str = Field(..., description="User id")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    first_login: datetime = Field(..., description="First login time")
    last_login: datetime = Field(..., description="Last login time")
