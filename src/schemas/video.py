"""Video metadata schemas."""

from pydantic import BaseModel, Field


class VideoMetadataRequest(BaseModel):
    """Look up metadata for a video URL."""

    video_url: str = Field(..., min_length=1, max_length=2048)


class VideoMetadataResponse(BaseModel):
    """Metadata in the shape shared by every provider, or an error reason."""

    title: str | None = None
    thumbnail_url: str | None = None
    author_name: str | None = None
    description: str | None = None
    view_count: int | None = None
    like_count: int | None = None
    view_count_formatted: str | None = None
    like_count_formatted: str | None = None
    platform: str | None = None
    original_url: str | None = None
    cleaned_url: str | None = None
    error: str | None = None
