"""Source item model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Item(BaseModel):
    """One piece of source video content.

    Attributes:
        id: Stable identifier (YouTube video id).
        title: Video title.
        source: Display name of the source channel.
        duration: Human readable duration, e.g. "4:13".
        published_at: Timezone-aware publish timestamp.
        description: Video description, used when no transcript exists.
        thumbnail_url: Thumbnail reference.
        url: Playback URL.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    source: str = ""
    duration: str = "0:00"
    published_at: datetime
    description: str = ""
    thumbnail_url: str | None = None
    url: str

    def with_source(self, source: str) -> "Item":
        """Return a copy tagged with the given source name."""
        return self.model_copy(update={"source": source})
