# src/briefing_bot/delivery/settings.py
"""Settings for the delivery channel."""

from pydantic import BaseModel, Field, computed_field


class DeliverySettings(BaseModel):
    """Configuration for Telegram delivery.

    Attributes:
        enabled: Whether messages are sent at all.
        telegram_token: Bot token from BotFather.
        chat_id: Destination chat for briefings.
        parse_mode: Telegram parse mode of outbound text.
        max_message_length: Hard limit per message; longer text is truncated.
        message_interval_seconds: Pause between consecutive briefing messages.
    """

    enabled: bool = True
    telegram_token: str = ""
    chat_id: str = ""
    parse_mode: str = "Markdown"
    max_message_length: int = Field(default=4096, ge=16, le=4096)
    message_interval_seconds: float = Field(default=0.5, ge=0)

    @computed_field
    @property
    def is_configured(self) -> bool:
        """Check if Telegram credentials are configured."""
        return bool(self.telegram_token and self.chat_id)
