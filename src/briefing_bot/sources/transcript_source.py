"""Transcript source backed by youtube-transcript-api."""

import asyncio
import logging
import re

from youtube_transcript_api import CouldNotRetrieveTranscript, YouTubeTranscriptApi

from briefing_bot.sources.base import TranscriptSource

logger = logging.getLogger(__name__)

_CUE_MARKER = re.compile(r"\[[^\]]*\]")
_WHITESPACE = re.compile(r"\s+")


def join_snippets(snippets) -> str | None:
    """Join transcript snippets into one line of text.

    Cue markers such as ``[Music]`` are dropped.

    Returns:
        Space-joined text, or None when nothing is left.
    """
    text = " ".join(snippet.text for snippet in snippets)
    text = _CUE_MARKER.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text or None


class YouTubeTranscriptSource(TranscriptSource):
    """Fetches manual or generated captions for a video.

    Best effort: a missing transcript or any fetch problem yields None.
    """

    def __init__(self, languages: list[str] | None = None, api: YouTubeTranscriptApi | None = None):
        """Initialize the source.

        Args:
            languages: Caption languages in order of preference.
            api: Transcript client, created on first use when not given.
        """
        self._languages = list(languages or ["en"])
        self._api = api

    async def fetch(self, item_id: str) -> str | None:
        """Return transcript text for a video, or None."""
        try:
            return await asyncio.to_thread(self._fetch_sync, item_id)
        except CouldNotRetrieveTranscript as e:
            logger.info(f"No transcript for {item_id}: {type(e).__name__}")
            return None
        except Exception as e:
            logger.warning(f"Transcript fetch error for {item_id}: {e}")
            return None

    def _fetch_sync(self, item_id: str) -> str | None:
        if self._api is None:
            self._api = YouTubeTranscriptApi()
        transcript = self._api.fetch(item_id, languages=self._languages)
        return join_snippets(transcript)
