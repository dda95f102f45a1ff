"""Video metadata lookup across hosting platforms.

Each platform is queried through its own API first. Missing title, thumbnail
or author are then filled from the platform's oEmbed endpoint. Provider
failures are logged and leave the field unset; only when nothing usable is
found does the lookup return an ``{"error": ...}`` result.
"""

import logging
from typing import Any
from urllib.parse import parse_qs, quote, urlencode, urlparse, urlunparse

import httpx

from src.config import get_settings
from src.models.enums import VideoPlatform

logger = logging.getLogger(__name__)

TRACKING_PARAMS = {
    "t",
    "time_continue",
    "feature",
    "app",
    "si",
    "pp",
    "fbclid",
    "gclid",
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "ref",
    "source",
    "campaign",
    "medium",
}

METADATA_FIELDS = ("title", "thumbnail_url", "author_name", "description", "view_count", "like_count")


def empty_metadata() -> dict[str, Any]:
    return dict.fromkeys(METADATA_FIELDS)


def format_count(num: int) -> str:
    """Abbreviate a count as 1.2K, 3.4M or 1B."""
    for threshold, suffix in ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K")):
        if num >= threshold:
            value = f"{num / threshold:.1f}"
            if value.endswith(".0"):
                value = value[:-2]
            return f"{value}{suffix}"
    return str(num)


PLATFORM_DOMAINS = {
    VideoPlatform.YOUTUBE: ("youtube.com", "youtu.be"),
    VideoPlatform.VIMEO: ("vimeo.com",),
    VideoPlatform.DAILYMOTION: ("dailymotion.com",),
    VideoPlatform.TWITCH: ("twitch.tv",),
}


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def detect_platform(url: str) -> VideoPlatform:
    """Identify the hosting platform from the URL's host or its subdomains."""
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return VideoPlatform.OTHER

    for platform, domains in PLATFORM_DOMAINS.items():
        if any(_host_matches(host, domain) for domain in domains):
            return platform
    return VideoPlatform.OTHER


def _first_segment(path: str) -> str:
    return path.strip("/").split("/")[0]


def _youtube_id(parsed) -> str | None:
    if parsed.hostname == "youtu.be":
        return _first_segment(parsed.path) or None
    if "/watch" in parsed.path:
        return (parse_qs(parsed.query).get("v") or [None])[0]
    for marker in ("/embed/", "/shorts/"):
        if marker in parsed.path:
            return _first_segment(parsed.path.split(marker, 1)[1]) or None
    return None


def clean_video_url(url: str) -> str:
    """Canonicalise a video URL and drop tracking parameters.

    Unparseable input is returned unchanged.
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return url
    if not parsed.scheme or not parsed.hostname:
        return url

    host = parsed.hostname
    platform = detect_platform(url)

    if platform == VideoPlatform.YOUTUBE:
        video_id = _youtube_id(parsed)
        if video_id:
            return f"https://www.youtube.com/watch?v={video_id}"

    if platform == VideoPlatform.VIMEO:
        parts = [part for part in parsed.path.split("/") if part]
        if parts:
            return f"https://vimeo.com/{parts[-1]}"

    if platform == VideoPlatform.DAILYMOTION and "/video/" in parsed.path:
        video_id = parsed.path.split("/video/", 1)[1].split("_")[0]
        return f"https://www.dailymotion.com/video/{_first_segment(video_id)}"

    if platform == VideoPlatform.TWITCH:
        if "/videos/" in parsed.path:
            video_id = _first_segment(parsed.path.split("/videos/", 1)[1])
            return f"https://www.twitch.tv/videos/{video_id}"
        if "/clip/" in parsed.path:
            slug = _first_segment(parsed.path.split("/clip/", 1)[1])
            return f"https://www.twitch.tv/clip/{slug}"
        if host == "clips.twitch.tv":
            return f"https://www.twitch.tv/clip/{_first_segment(parsed.path)}"

    query = [
        (key, value)
        for key, values in parse_qs(parsed.query, keep_blank_values=True).items()
        if key not in TRACKING_PARAMS
        for value in values
    ]
    return urlunparse(parsed._replace(query=urlencode(query)))


def _to_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class VideoMetadataService:
    """Service for fetching video metadata from platform APIs."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = get_settings()
        self.timeout = self.settings.http_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        provider: str,
        **kwargs: Any,
    ) -> dict | None:
        """GET a JSON document, logging and swallowing provider failures."""
        try:
            response = await client.get(url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"{provider} request failed: {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Error fetching from {provider}: {e}")
        return None

    async def fetch_youtube(self, client: httpx.AsyncClient, video_id: str) -> dict[str, Any]:
        metadata = empty_metadata()
        if not self.settings.youtube_api_key:
            return metadata

        data = await self._get_json(
            client,
            "https://www.googleapis.com/youtube/v3/videos",
            "YouTube Data API",
            params={
                "id": video_id,
                "key": self.settings.youtube_api_key,
                "part": "snippet,statistics",
            },
        )
        items = (data or {}).get("items") or []
        if not items:
            return metadata

        snippet = items[0].get("snippet") or {}
        statistics = items[0].get("statistics") or {}
        thumbnails = snippet.get("thumbnails") or {}
        for size in ("maxres", "high", "medium", "default"):
            if thumbnails.get(size, {}).get("url"):
                metadata["thumbnail_url"] = thumbnails[size]["url"]
                break
        metadata["title"] = snippet.get("title") or None
        metadata["author_name"] = snippet.get("channelTitle") or None
        metadata["description"] = snippet.get("description") or None
        metadata["view_count"] = _to_int(statistics.get("viewCount"))
        metadata["like_count"] = _to_int(statistics.get("likeCount"))
        return metadata

    async def fetch_vimeo(self, client: httpx.AsyncClient, video_id: str) -> dict[str, Any]:
        metadata = empty_metadata()
        if not self.settings.vimeo_api_key:
            return metadata

        data = await self._get_json(
            client,
            f"https://api.vimeo.com/videos/{video_id}",
            "Vimeo API",
            headers={"Authorization": f"Bearer {self.settings.vimeo_api_key}"},
        )
        if not data:
            return metadata

        sizes = (data.get("pictures") or {}).get("sizes") or []
        metadata["title"] = data.get("name") or None
        metadata["thumbnail_url"] = sizes[-1].get("link") if sizes else None
        metadata["author_name"] = (data.get("user") or {}).get("name") or None
        metadata["description"] = data.get("description") or None
        metadata["view_count"] = _to_int((data.get("stats") or {}).get("plays"))
        return metadata

    async def fetch_dailymotion(
        self, client: httpx.AsyncClient, video_id: str
    ) -> dict[str, Any]:
        metadata = empty_metadata()
        data = await self._get_json(
            client,
            "https://www.dailymotion.com/services/oembed",
            "Dailymotion oEmbed",
            params={"url": f"https://www.dailymotion.com/video/{video_id}", "format": "json"},
        )
        if data:
            metadata["title"] = data.get("title") or None
            metadata["thumbnail_url"] = data.get("thumbnail_url") or None
            metadata["author_name"] = data.get("author_name") or None
        return metadata

    async def _twitch_token(self, client: httpx.AsyncClient) -> str | None:
        """Client-credentials token for the Helix API."""
        try:
            response = await client.post(
                "https://id.twitch.tv/oauth2/token",
                data={
                    "client_id": self.settings.twitch_client_id,
                    "client_secret": self.settings.twitch_client_secret,
                    "grant_type": "client_credentials",
                },
            )
            response.raise_for_status()
            return response.json().get("access_token")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to get Twitch access token: {e}")
            return None

    async def fetch_twitch(
        self, client: httpx.AsyncClient, resource: str, identifier: str
    ) -> dict[str, Any]:
        """Fetch a Twitch VOD (``resource="videos"``) or clip (``"clips"``)."""
        metadata = empty_metadata()
        if not (self.settings.twitch_client_id and self.settings.twitch_client_secret):
            return metadata

        access_token = await self._twitch_token(client)
        if not access_token:
            return metadata

        data = await self._get_json(
            client,
            f"https://api.twitch.tv/helix/{resource}",
            f"Twitch {resource} API",
            params={"id": identifier},
            headers={
                "Client-ID": self.settings.twitch_client_id,
                "Authorization": f"Bearer {access_token}",
            },
        )
        entries = (data or {}).get("data") or []
        if not entries:
            return metadata

        entry = entries[0]
        metadata["title"] = entry.get("title") or None
        metadata["view_count"] = _to_int(entry.get("view_count"))
        if resource == "videos":
            thumbnail = entry.get("thumbnail_url") or ""
            metadata["thumbnail_url"] = (
                thumbnail.replace("%{width}", "480").replace("%{height}", "272") or None
            )
            metadata["author_name"] = entry.get("user_name") or None
            metadata["description"] = entry.get("description") or None
        else:
            metadata["thumbnail_url"] = entry.get("thumbnail_url") or None
            metadata["author_name"] = entry.get("broadcaster_name") or None
            game = entry.get("game_name")
            metadata["description"] = f"Clip from {game}" if game else None
        return metadata

    async def fetch_oembed(
        self, client: httpx.AsyncClient, cleaned_url: str, platform: VideoPlatform
    ) -> dict[str, Any]:
        """Fallback lookup through the platform's public oEmbed endpoint."""
        metadata = empty_metadata()
        endpoints = {
            VideoPlatform.YOUTUBE: "https://www.youtube.com/oembed?url={url}&format=json",
            VideoPlatform.VIMEO: "https://vimeo.com/api/oembed.json?url={url}",
            VideoPlatform.DAILYMOTION: (
                "https://www.dailymotion.com/services/oembed?url={url}&format=json"
            ),
        }
        endpoint = endpoints.get(platform)
        if endpoint is None:
            return metadata

        data = await self._get_json(
            client, endpoint.format(url=quote(cleaned_url, safe="")), f"{platform.value} oEmbed"
        )
        if data:
            metadata["title"] = data.get("title") or None
            metadata["thumbnail_url"] = data.get("thumbnail_url") or None
            metadata["author_name"] = data.get("author_name") or None
        return metadata

    async def _fetch_platform(
        self, client: httpx.AsyncClient, parsed, platform: VideoPlatform
    ) -> dict[str, Any]:
        if platform == VideoPlatform.YOUTUBE:
            video_id = _youtube_id(parsed)
            return await self.fetch_youtube(client, video_id) if video_id else empty_metadata()

        if platform == VideoPlatform.VIMEO:
            parts = [part for part in parsed.path.split("/") if part]
            return await self.fetch_vimeo(client, parts[-1]) if parts else empty_metadata()

        if platform == VideoPlatform.DAILYMOTION and "/video/" in parsed.path:
            video_id = parsed.path.split("/video/", 1)[1].split("_")[0]
            return await self.fetch_dailymotion(client, video_id)

        if platform == VideoPlatform.TWITCH:
            if "/videos/" in parsed.path:
                video_id = _first_segment(parsed.path.split("/videos/", 1)[1])
                return await self.fetch_twitch(client, "videos", video_id)
            if "/clip/" in parsed.path:
                slug = _first_segment(parsed.path.split("/clip/", 1)[1])
                return await self.fetch_twitch(client, "clips", slug)

        return empty_metadata()

    async def get_video_metadata(self, video_url: str) -> dict[str, Any]:
        """Look up metadata for a video URL.

        Returns:
            dict with title, thumbnail_url, author_name, description,
            view_count, like_count, their formatted variants, platform,
            original_url and cleaned_url; or ``{"error": reason}``.
        """
        cleaned_url = clean_video_url(video_url)
        platform = detect_platform(cleaned_url)
        logger.info(f"Fetching metadata for {cleaned_url} ({platform.value})")

        parsed = urlparse(cleaned_url)
        if not parsed.scheme or not parsed.hostname:
            return {"error": "Invalid video URL format."}
        if platform == VideoPlatform.OTHER:
            return {"error": "Unsupported video platform."}

        async with self._client() as client:
            metadata = await self._fetch_platform(client, parsed, platform)

            if not (metadata["title"] and metadata["thumbnail_url"] and metadata["author_name"]):
                logger.info(f"Missing data for {platform.value}, trying oEmbed fallback")
                fallback = await self.fetch_oembed(client, cleaned_url, platform)
                for field in ("title", "thumbnail_url", "author_name"):
                    metadata[field] = metadata[field] or fallback[field]

        if not metadata["title"] and not metadata["thumbnail_url"]:
            return {"error": f"Could not fetch video metadata from {platform.value}."}

        return {
            **metadata,
            "view_count_formatted": (
                format_count(metadata["view_count"]) if metadata["view_count"] is not None else None
            ),
            "like_count_formatted": (
                format_count(metadata["like_count"]) if metadata["like_count"] is not None else None
            ),
            "platform": platform.value,
            "original_url": video_url,
            "cleaned_url": cleaned_url,
        }
