"""Tests for URL cleaning and video metadata lookup."""

import httpx
import pytest

from src.models.enums import VideoPlatform
from src.services.video_metadata import (
    VideoMetadataService,
    clean_video_url,
    detect_platform,
    format_count,
)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://youtu.be/abc123?si=xyz", "https://www.youtube.com/watch?v=abc123"),
        (
            "https://www.youtube.com/watch?v=abc123&t=42&feature=share",
            "https://www.youtube.com/watch?v=abc123",
        ),
        ("https://youtube.com/shorts/abc123", "https://www.youtube.com/watch?v=abc123"),
        ("https://player.vimeo.com/video/76979871", "https://vimeo.com/76979871"),
        (
            "https://www.dailymotion.com/video/x7tgad0_some-title",
            "https://www.dailymotion.com/video/x7tgad0",
        ),
        ("https://clips.twitch.tv/FunnySlug", "https://www.twitch.tv/clip/FunnySlug"),
        (
            "https://example.com/watch?id=5&utm_source=mail",
            "https://example.com/watch?id=5",
        ),
        (
            "https://notyoutube.com/watch?v=abc&utm_source=x",
            "https://notyoutube.com/watch?v=abc",
        ),
        ("not a url", "not a url"),
    ],
)
def test_clean_video_url(url, expected):
    assert clean_video_url(url) == expected


@pytest.mark.parametrize(
    "url,platform",
    [
        ("https://www.youtube.com/watch?v=1", VideoPlatform.YOUTUBE),
        ("https://youtu.be/1", VideoPlatform.YOUTUBE),
        ("https://vimeo.com/1", VideoPlatform.VIMEO),
        ("https://www.dailymotion.com/video/x1", VideoPlatform.DAILYMOTION),
        ("https://www.twitch.tv/videos/1", VideoPlatform.TWITCH),
        ("https://example.com/video.mp4", VideoPlatform.OTHER),
        ("https://m.youtube.com/watch?v=1", VideoPlatform.YOUTUBE),
        ("https://clips.twitch.tv/Slug", VideoPlatform.TWITCH),
        ("https://notyoutube.com/watch?v=1", VideoPlatform.OTHER),
        ("https://evilvimeo.com.example/1", VideoPlatform.OTHER),
        ("https://vimeo.com.attacker.net/1", VideoPlatform.OTHER),
    ],
)
def test_detect_platform(url, platform):
    assert detect_platform(url) == platform


@pytest.mark.parametrize(
    "num,expected",
    [(999, "999"), (1000, "1K"), (1234, "1.2K"), (3_400_000, "3.4M"), (1_000_000_000, "1B")],
)
def test_format_count(num, expected):
    assert format_count(num) == expected


def make_service(handler, **settings) -> VideoMetadataService:
    service = VideoMetadataService(transport=httpx.MockTransport(handler))
    service.settings = service.settings.model_copy(update=settings)
    return service


@pytest.mark.asyncio
async def test_youtube_api_lookup():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "www.googleapis.com"
        assert request.url.params["id"] == "abc123"
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "snippet": {
                            "title": "Great talk",
                            "channelTitle": "Conf",
                            "description": "Slides inside",
                            "thumbnails": {"high": {"url": "https://img/high.jpg"}},
                        },
                        "statistics": {"viewCount": "15300", "likeCount": "120"},
                    }
                ]
            },
        )

    service = make_service(handler, youtube_api_key="key")
    result = await service.get_video_metadata("https://youtu.be/abc123?si=share")

    assert result["title"] == "Great talk"
    assert result["author_name"] == "Conf"
    assert result["thumbnail_url"] == "https://img/high.jpg"
    assert result["view_count"] == 15300
    assert result["view_count_formatted"] == "15.3K"
    assert result["like_count_formatted"] == "120"
    assert result["platform"] == "youtube"
    assert result["cleaned_url"] == "https://www.youtube.com/watch?v=abc123"
    assert result["original_url"] == "https://youtu.be/abc123?si=share"


@pytest.mark.asyncio
async def test_falls_back_to_oembed_without_api_key():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/oembed.json"
        return httpx.Response(
            200,
            json={
                "title": "Short film",
                "thumbnail_url": "https://i.vimeocdn.com/1.jpg",
                "author_name": "Studio",
            },
        )

    service = make_service(handler, vimeo_api_key=None)
    result = await service.get_video_metadata("https://vimeo.com/76979871")

    assert result["title"] == "Short film"
    assert result["author_name"] == "Studio"
    assert result["view_count"] is None
    assert result["view_count_formatted"] is None


@pytest.mark.asyncio
async def test_provider_failure_reports_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    service = make_service(handler, youtube_api_key="key")
    result = await service.get_video_metadata("https://www.youtube.com/watch?v=abc123")

    assert result == {"error": "Could not fetch video metadata from youtube."}


@pytest.mark.asyncio
async def test_unsupported_platform():
    service = make_service(lambda request: httpx.Response(404))
    result = await service.get_video_metadata("https://example.com/clip.mp4")
    assert result == {"error": "Unsupported video platform."}


@pytest.mark.asyncio
async def test_invalid_url():
    service = make_service(lambda request: httpx.Response(404))
    result = await service.get_video_metadata("definitely not a url")
    assert result == {"error": "Invalid video URL format."}


def test_metadata_endpoint_returns_error_shape(client):
    response = client.post(
        "/api/v1/videos/metadata", json={"video_url": "https://example.com/clip.mp4"}
    )
    assert response.status_code == 200
    assert response.json()["error"] == "Unsupported video platform."
