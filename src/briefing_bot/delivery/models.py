"""Data models for delivery and inbound chat events."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Button:
    """Inline button; exactly one of callback_data and url is set."""

    text: str
    callback_data: str | None = None
    url: str | None = None


@dataclass
class OutboundMessage:
    """A rendered message ready to send.

    Attributes:
        text: Message text in the channel's parse mode.
        buttons: One row of inline buttons.
        chat_id: Destination override; the configured chat when None.
    """

    text: str
    buttons: list[Button] = field(default_factory=list)
    chat_id: str | None = None


@dataclass(frozen=True)
class CallbackEvent:
    """A user tapped an inline button."""

    actor_id: int | None
    chat_id: str
    payload: str
    query_id: str
    received_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class CommandEvent:
    """A user sent a slash command."""

    command: str
    chat_id: str
    actor_id: int | None = None
    args: tuple[str, ...] = ()
    received_at: datetime = field(default_factory=datetime.now)


@dataclass
class DeliveryReport:
    """Outcome of delivering one plan."""

    sent: int = 0
    failed: int = 0

    @property
    def delivered(self) -> bool:
        """True when at least one message went out and none failed."""
        return self.sent > 0 and self.failed == 0
