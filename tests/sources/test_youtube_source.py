# tests/sources/test_youtube_source.py
"""Tests for the YouTube Data API video source."""
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from googleapiclient.errors import HttpError

from briefing_bot.errors import SourceUnavailableError
from briefing_bot.sources.youtube_source import YouTubeVideoSource, parse_duration

WINDOW_START = datetime(2026, 1, 27, 14, 0, tzinfo=timezone.utc)
WINDOW_END = datetime(2026, 1, 27, 20, 30, tzinfo=timezone.utc)


def make_video(video_id: str, published_at: str, duration: str = "PT4M13S") -> dict:
    return {
        "id": video_id,
        "snippet": {
            "title": f"Video {video_id}",
            "channelTitle": "CNBC Television",
            "publishedAt": published_at,
            "description": "desc",
            "thumbnails": {"high": {"url": f"https://i.ytimg.com/{video_id}.jpg"}},
        },
        "contentDetails": {"duration": duration},
    }


class TestParseDuration:
    @pytest.mark.parametrize("iso,expected", [
        ("PT4M13S", "4:13"),
        ("PT1H2M3S", "1:02:03"),
        ("PT45S", "0:45"),
        ("PT10M", "10:00"),
        ("PT2H", "2:00:00"),
        ("", "0:00"),
        (None, "0:00"),
        ("garbage", "0:00"),
    ])
    def test_parse_duration(self, iso, expected):
        assert parse_duration(iso) == expected


class TestYouTubeVideoSource:
    """Tests for list_items with a mocked API client."""

    @pytest.mark.asyncio
    async def test_lists_items_newest_first(self):
        with patch("briefing_bot.sources.youtube_source.build") as mock_build:
            youtube = mock_build.return_value
            youtube.search.return_value.list.return_value.execute.return_value = {
                "items": [{"id": {"videoId": "a"}}, {"id": {"videoId": "b"}}, {"id": {}}]
            }
            youtube.videos.return_value.list.return_value.execute.return_value = {
                "items": [
                    make_video("a", "2026-01-27T15:00:00Z"),
                    make_video("b", "2026-01-27T19:00:00Z", "PT1H2M3S"),
                ]
            }

            source = YouTubeVideoSource(api_key="yt-key", max_results=10)
            items = await source.list_items("UC123", WINDOW_START, WINDOW_END)

            assert [i.id for i in items] == ["b", "a"]
            assert items[0].duration == "1:02:03"
            assert items[0].url == "https://www.youtube.com/watch?v=b"
            assert items[0].thumbnail_url == "https://i.ytimg.com/b.jpg"
            assert items[0].published_at == datetime(2026, 1, 27, 19, 0, tzinfo=timezone.utc)

            search_kwargs = youtube.search.return_value.list.call_args.kwargs
            assert search_kwargs["channelId"] == "UC123"
            assert search_kwargs["publishedAfter"] == "2026-01-27T14:00:00Z"
            assert search_kwargs["publishedBefore"] == "2026-01-27T20:30:00Z"
            assert search_kwargs["maxResults"] == 10
            youtube.videos.return_value.list.assert_called_once_with(
                part="snippet,contentDetails", id="a,b"
            )

    @pytest.mark.asyncio
    async def test_no_search_results(self):
        with patch("briefing_bot.sources.youtube_source.build") as mock_build:
            youtube = mock_build.return_value
            youtube.search.return_value.list.return_value.execute.return_value = {"items": []}

            items = await YouTubeVideoSource(api_key="k").list_items("UC1", WINDOW_START, WINDOW_END)

            assert items == []
            youtube.videos.assert_not_called()

    @pytest.mark.asyncio
    async def test_unparseable_video_skipped(self):
        with patch("briefing_bot.sources.youtube_source.build") as mock_build:
            youtube = mock_build.return_value
            youtube.search.return_value.list.return_value.execute.return_value = {
                "items": [{"id": {"videoId": "a"}}, {"id": {"videoId": "bad"}}]
            }
            youtube.videos.return_value.list.return_value.execute.return_value = {
                "items": [make_video("a", "2026-01-27T15:00:00Z"), {"id": "bad", "snippet": {}}]
            }

            items = await YouTubeVideoSource(api_key="k").list_items("UC1", WINDOW_START, WINDOW_END)

            assert [i.id for i in items] == ["a"]

    @pytest.mark.asyncio
    async def test_api_error_raises_source_unavailable(self):
        with patch("briefing_bot.sources.youtube_source.build") as mock_build:
            resp = MagicMock(status=403, reason="Forbidden")
            mock_build.return_value.search.return_value.list.return_value.execute.side_effect = (
                HttpError(resp, b'{"error": {"message": "quotaExceeded"}}')
            )

            with pytest.raises(SourceUnavailableError):
                await YouTubeVideoSource(api_key="k").list_items("UC1", WINDOW_START, WINDOW_END)
