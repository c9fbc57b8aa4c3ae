# src/briefing_bot/config/settings.py
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from briefing_bot.analysis.settings import AnalysisSettings
from briefing_bot.cache.item_cache import CacheSettings
from briefing_bot.delivery.settings import DeliverySettings
from briefing_bot.pipeline.settings import PipelineSettings, SchedulerSettings, WeeklyReviewSettings
from briefing_bot.sources.settings import SourcesSettings
from briefing_bot.storage.recommendation_store import StorageSettings


class SystemConfig(BaseModel):
    name: str = "Morning Briefing Bot"
    version: str = "1.0.0"


class TelegramConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TELEGRAM_")

    bot_token: str = ""
    chat_id: str = ""


class AnthropicConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANTHROPIC_")

    api_key: str = ""


class YouTubeConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="YOUTUBE_")

    api_key: str = ""


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    sources: SourcesSettings = Field(default_factory=SourcesSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    weekly_review: WeeklyReviewSettings = Field(default_factory=WeeklyReviewSettings)
    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)
    youtube: YouTubeConfig = Field(default_factory=YouTubeConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        telegram = TelegramConfig()
        anthropic = AnthropicConfig()
        youtube = YouTubeConfig()

        return cls(
            **data,
            telegram=telegram,
            anthropic=anthropic,
            youtube=youtube,
        )

    def delivery_settings(self) -> DeliverySettings:
        """Delivery settings with the Telegram credentials filled in."""
        return self.delivery.model_copy(
            update={
                "telegram_token": self.delivery.telegram_token or self.telegram.bot_token,
                "chat_id": self.delivery.chat_id or self.telegram.chat_id,
            }
        )
