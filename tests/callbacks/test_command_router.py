# tests/callbacks/test_command_router.py
"""Tests for CommandRouter."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from briefing_bot.callbacks.command_router import BRIEFING_ACK_TEXT, WELCOME_TEXT, CommandRouter
from briefing_bot.delivery.models import CommandEvent


@pytest.fixture
def channel():
    channel = MagicMock()
    channel.send_message = AsyncMock(return_value=True)
    return channel


class TestCommandRouter:
    """Tests for slash command routing."""

    @pytest.mark.asyncio
    async def test_start_sends_welcome(self, channel):
        on_briefing = AsyncMock()
        router = CommandRouter(channel, on_briefing)

        assert await router.handle(CommandEvent(command="start", chat_id="42")) is True

        channel.send_message.assert_awaited_once_with(WELCOME_TEXT, chat_id="42")
        on_briefing.assert_not_called()

    @pytest.mark.asyncio
    async def test_briefing_acknowledges_and_runs(self, channel):
        on_briefing = AsyncMock()
        router = CommandRouter(channel, on_briefing)

        assert await router.handle(CommandEvent(command="briefing", chat_id="42", actor_id=7)) is True
        await router.wait_idle()

        channel.send_message.assert_awaited_once_with(BRIEFING_ACK_TEXT, chat_id="42")
        on_briefing.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_briefing_failure_does_not_escape(self, channel):
        router = CommandRouter(channel, AsyncMock(side_effect=RuntimeError("boom")))

        await router.handle(CommandEvent(command="briefing", chat_id="42"))
        await router.wait_idle()

    @pytest.mark.asyncio
    async def test_unknown_command(self, channel):
        router = CommandRouter(channel, AsyncMock())

        assert await router.handle(CommandEvent(command="help", chat_id="42")) is False
        channel.send_message.assert_not_called()
