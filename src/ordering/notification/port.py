"""Notifier port — abstract interface for delivering order notifications."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    """A rendered notification for one recipient."""

    order_id: str
    recipient_role: str  # customer, chef or admin
    email: str | None
    title: str
    name: str
    time: str
    message: str


class Notifier(ABC):
    """Abstract interface for notification adapters (e-mail service, queue, ...)."""

    @abstractmethod
    def notify(self, message: Message) -> bool:
        """Deliver ``message``.

        Returns:
            True when the message was accepted for delivery, False otherwise.
        """
        ...
