"""Abstract delivery channel."""

from abc import ABC, abstractmethod
from datetime import date

from briefing_bot.delivery.models import DeliveryReport
from briefing_bot.models.plan import DeliveryPlan


class DeliveryChannel(ABC):
    """Renders delivery plans and sends plain messages to the chat."""

    @abstractmethod
    async def deliver(self, plan: DeliveryPlan) -> DeliveryReport:
        """Send every message of a plan, in order."""

    @abstractmethod
    async def send_message(self, text: str, chat_id: str | None = None) -> bool:
        """Send one text message; returns False when it could not be sent."""

    @abstractmethod
    async def send_no_items_notice(self, briefing_date: date) -> bool:
        """Tell the chat a full run found nothing to brief."""
