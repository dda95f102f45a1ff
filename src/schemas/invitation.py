"""Invitation schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class InvitationCreate(BaseModel):
    """Invite an email address to a list."""

    email: EmailStr = Field(..., max_length=255)


class InvitationResponse(BaseModel):
    """Invitation response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    list_id: int
    invited_email: str
    invited_by_id: int
    status: str
    created_at: datetime


class InvitationStatusResponse(InvitationResponse):
    """Invitation as shown to the list owner."""

    invited_user_exists: bool
    has_accessed: bool
