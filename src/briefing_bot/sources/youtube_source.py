"""YouTube Data API video source."""

import asyncio
import logging
import re
from datetime import datetime, timezone

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from briefing_bot.errors import SourceUnavailableError
from briefing_bot.models.item import Item
from briefing_bot.sources.base import VideoSource

logger = logging.getLogger(__name__)

_ISO_DURATION = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_duration(iso_duration: str | None) -> str:
    """Convert an ISO 8601 duration to display form.

    "PT4M13S" -> "4:13", "PT1H2M3S" -> "1:02:03". Unparseable input -> "0:00".
    """
    if not iso_duration:
        return "0:00"
    match = _ISO_DURATION.match(iso_duration)
    if not match:
        return "0:00"

    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class YouTubeVideoSource(VideoSource):
    """Lists channel uploads in a time window via the YouTube Data API v3."""

    WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

    def __init__(self, api_key: str, max_results: int = 50):
        """Initialize the source.

        Args:
            api_key: YouTube Data API key.
            max_results: Maximum search results per channel and window.
        """
        self._api_key = api_key
        self._max_results = max_results
        self._youtube = None

    def _service(self):
        if self._youtube is None:
            self._youtube = build(
                "youtube", "v3", developerKey=self._api_key, cache_discovery=False
            )
        return self._youtube

    async def list_items(
        self, source_id: str, window_start: datetime, window_end: datetime
    ) -> list[Item]:
        """List a channel's videos published inside the window, newest first.

        Args:
            source_id: YouTube channel id.
            window_start: Inclusive window start (timezone-aware).
            window_end: Inclusive window end (timezone-aware).

        Raises:
            SourceUnavailableError: If the API call fails.
        """
        try:
            items = await asyncio.to_thread(
                self._fetch_channel, source_id, window_start, window_end
            )
        except HttpError as e:
            raise SourceUnavailableError(f"YouTube API error for {source_id}: {e}") from e

        return sorted(items, key=lambda i: i.published_at, reverse=True)

    def _fetch_channel(
        self, channel_id: str, window_start: datetime, window_end: datetime
    ) -> list[Item]:
        youtube = self._service()
        search = (
            youtube.search()
            .list(
                part="snippet",
                channelId=channel_id,
                publishedAfter=_rfc3339(window_start),
                publishedBefore=_rfc3339(window_end),
                type="video",
                order="date",
                maxResults=self._max_results,
            )
            .execute()
        )

        video_ids = [
            entry["id"]["videoId"]
            for entry in search.get("items", [])
            if entry.get("id", {}).get("videoId")
        ]
        if not video_ids:
            return []

        details = (
            youtube.videos()
            .list(part="snippet,contentDetails", id=",".join(video_ids))
            .execute()
        )

        items = []
        for video in details.get("items", []):
            try:
                items.append(self._parse_video(video))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping unparseable video {video.get('id')}: {e}")
        return items

    def _parse_video(self, video: dict) -> Item:
        snippet = video["snippet"]
        thumbnails = snippet.get("thumbnails", {})
        thumbnail = thumbnails.get("high") or thumbnails.get("default") or {}

        return Item(
            id=video["id"],
            title=snippet.get("title", ""),
            source=snippet.get("channelTitle", ""),
            duration=parse_duration(video.get("contentDetails", {}).get("duration")),
            published_at=_parse_timestamp(snippet["publishedAt"]),
            description=snippet.get("description", ""),
            thumbnail_url=thumbnail.get("url"),
            url=self.WATCH_URL.format(video_id=video["id"]),
        )
