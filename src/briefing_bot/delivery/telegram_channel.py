# src/briefing_bot/delivery/telegram_channel.py
"""Telegram delivery channel with an inbound event stream."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import date

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes

from briefing_bot.delivery.base import DeliveryChannel
from briefing_bot.delivery.formatter import BriefingFormatter, render_plan, truncate_message
from briefing_bot.delivery.models import (
    Button,
    CallbackEvent,
    CommandEvent,
    DeliveryReport,
    OutboundMessage,
)
from briefing_bot.delivery.settings import DeliverySettings
from briefing_bot.models.plan import DeliveryPlan

logger = logging.getLogger(__name__)

COMMANDS = ("start", "briefing")

InboundEvent = CallbackEvent | CommandEvent


def build_keyboard(buttons: list[Button]) -> InlineKeyboardMarkup | None:
    """Build a one-row inline keyboard, or None without buttons."""
    if not buttons:
        return None
    row = [
        InlineKeyboardButton(text=b.text, url=b.url)
        if b.url
        else InlineKeyboardButton(text=b.text, callback_data=b.callback_data)
        for b in buttons
    ]
    return InlineKeyboardMarkup([row])


class TelegramChannel(DeliveryChannel):
    """Sends briefings via Telegram and queues inbound callbacks and commands.

    Attributes:
        _settings: Delivery settings.
        _formatter: Briefing formatter.
        _bot: Telegram bot instance, set by start().
        _events: Queue of inbound events fed by the telegram.ext handlers.
    """

    def __init__(
        self,
        settings: DeliverySettings,
        formatter: BriefingFormatter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the channel.

        Args:
            settings: Delivery settings.
            formatter: Formatter used to render plans.
            sleep: Async sleep used between messages, injectable for tests.
        """
        self._settings = settings
        self._formatter = formatter or BriefingFormatter()
        self._sleep = sleep
        self._bot: Bot | None = None
        self._events: asyncio.Queue[InboundEvent] = asyncio.Queue()

    @property
    def is_enabled(self) -> bool:
        """Check if delivery is enabled and configured."""
        return self._settings.enabled and self._settings.is_configured

    @property
    def formatter(self) -> BriefingFormatter:
        return self._formatter

    async def start(self) -> None:
        """Initialize the Telegram bot."""
        if not self.is_enabled:
            logger.info("Telegram delivery disabled")
            return

        self._bot = Bot(token=self._settings.telegram_token)
        await self._bot.initialize()
        logger.info("Telegram channel started")

    async def stop(self) -> None:
        """Shutdown the bot gracefully."""
        if self._bot is not None:
            await self._bot.shutdown()
        self._bot = None
        logger.info("Telegram channel stopped")

    async def deliver(self, plan: DeliveryPlan) -> DeliveryReport:
        """Send all messages of a plan in order, pausing between them.

        A failed send is logged and does not stop the remaining messages.
        """
        report = DeliveryReport()
        messages = render_plan(plan, self._formatter)

        for index, message in enumerate(messages):
            if index > 0:
                await self._sleep(self._settings.message_interval_seconds)
            if await self._send(message):
                report.sent += 1
            else:
                report.failed += 1

        logger.info(
            f"Delivered {plan.kind.value} briefing: {report.sent} sent, {report.failed} failed"
        )
        return report

    async def send_message(self, text: str, chat_id: str | None = None) -> bool:
        """Send one plain message.

        Args:
            text: Message text.
            chat_id: Destination override.

        Returns:
            True if sent successfully, False otherwise.
        """
        return await self._send(OutboundMessage(text=text, chat_id=chat_id))

    async def send_no_items_notice(self, briefing_date: date) -> bool:
        return await self.send_message(self._formatter.format_no_items(briefing_date))

    async def answer_callback(self, query_id: str, text: str) -> bool:
        """Acknowledge a button tap with a short toast."""
        if self._bot is None:
            logger.warning("Bot not initialized, cannot answer callback")
            return False

        try:
            await self._bot.answer_callback_query(callback_query_id=query_id, text=text)
            return True
        except Exception as e:
            logger.error(f"Failed to answer callback {query_id}: {e}")
            return False

    async def _send(self, message: OutboundMessage) -> bool:
        if not self.is_enabled:
            return False

        if self._bot is None:
            logger.warning("Bot not initialized, cannot send message")
            return False

        try:
            await self._bot.send_message(
                chat_id=message.chat_id or self._settings.chat_id,
                text=truncate_message(message.text, self._settings.max_message_length),
                parse_mode=self._settings.parse_mode,
                reply_markup=build_keyboard(message.buttons),
            )
            return True
        except Exception as e:
            logger.error(f"Failed to send message: {e}")
            return False

    def build_application(self) -> Application:
        """Build a polling Application whose handlers feed events()."""
        application = Application.builder().token(self._settings.telegram_token).build()
        application.add_handler(CommandHandler(list(COMMANDS), self._on_command))
        application.add_handler(CallbackQueryHandler(self._on_callback))
        return application

    async def events(self) -> AsyncIterator[InboundEvent]:
        """Yield inbound events as they arrive."""
        while True:
            yield await self._events.get()

    async def _on_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if query is None:
            return

        chat_id = str(query.message.chat.id) if query.message else self._settings.chat_id
        await self._events.put(
            CallbackEvent(
                actor_id=query.from_user.id if query.from_user else None,
                chat_id=chat_id,
                payload=query.data or "",
                query_id=query.id,
            )
        )

    async def _on_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None or not message.text:
            return

        command = message.text.split()[0].lstrip("/").split("@")[0].lower()
        chat = update.effective_chat
        user = update.effective_user
        await self._events.put(
            CommandEvent(
                command=command,
                chat_id=str(chat.id) if chat else self._settings.chat_id,
                actor_id=user.id if user else None,
                args=tuple(context.args or ()),
            )
        )
