"""Inbound chat event handling."""

from briefing_bot.callbacks.callback_handler import (
    CallbackHandler,
    DetailOutcome,
    DetailStatus,
)
from briefing_bot.callbacks.command_router import CommandRouter

__all__ = [
    "CallbackHandler",
    "CommandRouter",
    "DetailOutcome",
    "DetailStatus",
]
