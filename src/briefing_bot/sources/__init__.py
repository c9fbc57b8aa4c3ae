"""External data sources."""

from briefing_bot.sources.base import Quote, QuoteSource, TranscriptSource, VideoSource
from briefing_bot.sources.market_fetcher import MarketDataFetcher
from briefing_bot.sources.quote_source import YFinanceQuoteSource
from briefing_bot.sources.settings import ChannelConfig, SourcesSettings
from briefing_bot.sources.transcript_source import YouTubeTranscriptSource
from briefing_bot.sources.youtube_source import YouTubeVideoSource

__all__ = [
    "ChannelConfig",
    "MarketDataFetcher",
    "Quote",
    "QuoteSource",
    "SourcesSettings",
    "TranscriptSource",
    "VideoSource",
    "YFinanceQuoteSource",
    "YouTubeTranscriptSource",
    "YouTubeVideoSource",
]
