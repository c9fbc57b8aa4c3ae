"""Slash command handling."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from briefing_bot.delivery.models import CommandEvent
from briefing_bot.delivery.telegram_channel import TelegramChannel

logger = logging.getLogger(__name__)

WELCOME_TEXT = (
    "👋 모닝 브리핑 봇입니다!\n\n"
    "매일 아침 CNBC와 Yahoo Finance의 주요 뉴스를 요약해드립니다."
)
BRIEFING_ACK_TEXT = "브리핑을 생성하고 있습니다... 잠시만 기다려주세요."


class CommandRouter:
    """Answers /start and triggers a full briefing on /briefing."""

    def __init__(
        self,
        channel: TelegramChannel,
        on_briefing: Callable[[], Awaitable[object]],
    ):
        """Initialize the router.

        Args:
            channel: Channel replies are sent through.
            on_briefing: Coroutine factory running a full briefing.
        """
        self._channel = channel
        self._on_briefing = on_briefing
        self._tasks: set[asyncio.Task] = set()

    async def handle(self, event: CommandEvent) -> bool:
        """Handle one command.

        Returns:
            True if the command was recognised.
        """
        if event.command == "start":
            await self._channel.send_message(WELCOME_TEXT, chat_id=event.chat_id)
            return True

        if event.command == "briefing":
            await self._channel.send_message(BRIEFING_ACK_TEXT, chat_id=event.chat_id)
            task = asyncio.create_task(self._on_briefing(), name="manual_briefing")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            logger.info(f"Manual briefing requested by {event.actor_id}")
            return True

        logger.debug(f"Unknown command /{event.command}")
        return False

    async def wait_idle(self) -> None:
        """Wait for background briefings started by commands."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
