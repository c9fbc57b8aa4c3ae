"""Telegram delivery of briefings and inbound chat events."""

from briefing_bot.delivery.base import DeliveryChannel
from briefing_bot.delivery.formatter import (
    BriefingFormatter,
    escape_markdown,
    format_number,
    render_plan,
    truncate_message,
)
from briefing_bot.delivery.models import (
    Button,
    CallbackEvent,
    CommandEvent,
    DeliveryReport,
    OutboundMessage,
)
from briefing_bot.delivery.settings import DeliverySettings
from briefing_bot.delivery.telegram_channel import TelegramChannel

__all__ = [
    "BriefingFormatter",
    "Button",
    "CallbackEvent",
    "CommandEvent",
    "DeliveryChannel",
    "DeliveryReport",
    "DeliverySettings",
    "OutboundMessage",
    "TelegramChannel",
    "escape_markdown",
    "format_number",
    "render_plan",
    "truncate_message",
]
