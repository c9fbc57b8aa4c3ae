"""Settings for external sources."""

from pydantic import BaseModel, Field


class ChannelConfig(BaseModel):
    """A video source channel."""

    name: str
    channel_id: str


class SourcesSettings(BaseModel):
    """Configuration for video, transcript and market sources.

    Attributes:
        channels: Channels to enumerate, with their display names.
        max_results_per_channel: Search page size per channel.
        transcript_languages: Caption languages in order of preference.
        indices: Display name to symbol for major indices, in display order.
        sector_etfs: Sector name to ETF symbol.
        hot_sector_count: How many hot/cold sectors to report.
    """

    channels: list[ChannelConfig] = Field(
        default_factory=lambda: [
            ChannelConfig(name="CNBC", channel_id="UCvJJ_dzjViJCoLf5uKUTwoA"),
            ChannelConfig(name="Yahoo Finance", channel_id="UCEAZeUIeJs0IjQiqTCdVSIg"),
            ChannelConfig(name="Bloomberg", channel_id="UCIALMKvObZNtJ6AmdCLP7Lg"),
        ]
    )
    max_results_per_channel: int = Field(default=50, ge=1, le=50)
    transcript_languages: list[str] = Field(default_factory=lambda: ["en", "ko"])

    indices: dict[str, str] = Field(
        default_factory=lambda: {
            "S&P 500": "^GSPC",
            "NASDAQ": "^IXIC",
            "DOW": "^DJI",
            "VIX": "^VIX",
            "Russell 2000": "^RUT",
        }
    )
    sector_etfs: dict[str, str] = Field(
        default_factory=lambda: {
            "Technology": "XLK",
            "Healthcare": "XLV",
            "Financials": "XLF",
            "Consumer Discretionary": "XLY",
            "Communication Services": "XLC",
            "Industrials": "XLI",
            "Consumer Staples": "XLP",
            "Energy": "XLE",
            "Utilities": "XLU",
            "Real Estate": "XLRE",
            "Materials": "XLB",
        }
    )
    hot_sector_count: int = Field(default=3, ge=1, le=5)
