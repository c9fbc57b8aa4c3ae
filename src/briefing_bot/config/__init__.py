"""Application configuration."""

from briefing_bot.config.settings import (
    AnthropicConfig,
    Settings,
    SystemConfig,
    TelegramConfig,
    YouTubeConfig,
)

__all__ = [
    "AnthropicConfig",
    "Settings",
    "SystemConfig",
    "TelegramConfig",
    "YouTubeConfig",
]
