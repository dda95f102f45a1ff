"""Video metadata API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_video_metadata_service
from src.schemas.video import VideoMetadataRequest, VideoMetadataResponse
from src.services.video_metadata import VideoMetadataService

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


@router.post("/metadata", response_model=VideoMetadataResponse)
async def get_video_metadata(
    data: VideoMetadataRequest,
    metadata_service: Annotated[VideoMetadataService, Depends(get_video_metadata_service)],
):
    """Look up title, thumbnail and statistics for a video URL."""
    return await metadata_service.get_video_metadata(data.video_url)
