"""Fake notifier — records messages for testing."""

from ordering.notification.port import Message, Notifier


class FakeNotifier(Notifier):
    """Notifier that keeps messages in memory for test assertions."""

    def __init__(self):
        self.sent: list[Message] = []
        self.should_succeed = True

    def configure(self, should_succeed: bool = True):
        """Configure the fake notifier behavior for testing."""
        self.should_succeed = should_succeed

    def notify(self, message: Message) -> bool:
        if not self.should_succeed:
            return False
        self.sent.append(message)
        return True

    def for_role(self, role: str) -> list[Message]:
        return [m for m in self.sent if m.recipient_role == role]

    def reset(self):
        """Clear sent messages (useful between tests)."""
        self.sent.clear()
        self.should_succeed = True
