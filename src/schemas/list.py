"""List schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PermissionGroup(BaseModel):
    """Capabilities granted to one audience of a list."""

    can_view: bool = False
    can_add: bool = False
    can_remove: bool = False


class PermissionMatrix(BaseModel):
    """Full permission matrix stored on a list."""

    public: PermissionGroup
    users: PermissionGroup
    invited: PermissionGroup


class ListCreate(BaseModel):
    """Create a new list."""

    name: str = Field(..., min_length=1, max_length=255)


class ListAccessResponse(BaseModel):
    """Effective capabilities of the caller on a list."""

    model_config = ConfigDict(from_attributes=True)

    can_view: bool
    can_add: bool
    can_remove: bool
    is_owner: bool


class ListResponse(BaseModel):
    """List response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    owner_id: int
    share_token: str | None
    permissions: PermissionMatrix
    created_at: datetime
    updated_at: datetime


class SharedListResponse(ListResponse):
    """A list shared with the caller, with how and what they can do."""

    access_level: str
    access: ListAccessResponse
