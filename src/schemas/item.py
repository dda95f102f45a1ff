"""List item schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import VideoPlatform


class Ratings(BaseModel):
    """Three-category numeric rating of a video."""

    category1: float = 0
    category2: float = 0
    category3: float = 0


class ItemCreate(BaseModel):
    """Add a video to a list."""

    video_url: str = Field(..., min_length=1, max_length=2048)
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    thumbnail_url: str | None = Field(None, max_length=2048)
    duration: str | None = Field(None, max_length=50)
    author_name: str | None = Field(None, max_length=255)
    view_count: int | None = Field(None, ge=0)
    like_count: int | None = Field(None, ge=0)
    published_at: str | None = Field(None, max_length=50)
    platform: VideoPlatform | None = None
    tags: list[str] | None = None


class ItemUpdate(BaseModel):
    """Update an item. Only fields that are sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    tags: list[str] | None = None
    rating_category1: float | None = Field(None, ge=0, le=10)
    rating_category2: float | None = Field(None, ge=0, le=10)
    rating_category3: float | None = Field(None, ge=0, le=10)


class ItemResponse(BaseModel):
    """Item response, including the caller's own watched flag."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    list_id: int
    added_by_id: int
    video_url: str
    title: str
    thumbnail_url: str | None = None
    duration: str | None = None
    author_name: str | None = None
    description: str | None = None
    view_count: int | None = None
    like_count: int | None = None
    published_at: str | None = None
    platform: str
    tags: list[str] | None = None
    ratings: Ratings | None = None
    watched: bool = False
    created_at: datetime
    updated_at: datetime


class WatchedResponse(BaseModel):
    """New watched state after a toggle."""

    item_id: int
    watched: bool
