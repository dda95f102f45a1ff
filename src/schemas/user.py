"""Username and profile schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UsernameClaim(BaseModel):
    """Claim a username for the current user."""

    username: str = Field(..., min_length=3, max_length=30)


class UsernameAvailability(BaseModel):
    """Whether a username can still be claimed."""

    username: str
    available: bool


class ProfileUpdate(BaseModel):
    """Update the current user's profile."""

    name: str | None = Field(None, max_length=255)
    username: str | None = Field(None, min_length=3, max_length=30)


class PublicProfile(BaseModel):
    """Profile information visible to other users."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    username: str | None = None
