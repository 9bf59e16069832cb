"""Notifier factory.

Provides get_notifier() / set_notifier() to swap implementations:
- FakeNotifier for development and testing (default)
- an e-mail service adapter in production
"""

from ordering.notification.fake_adapter import FakeNotifier
from ordering.notification.port import Notifier

_current_notifier: Notifier | None = None


def get_notifier() -> Notifier:
    """Return the current notifier. Defaults to FakeNotifier."""
    global _current_notifier
    if _current_notifier is None:
        _current_notifier = FakeNotifier()
    return _current_notifier


def set_notifier(notifier: Notifier) -> None:
    """Override the active notifier (useful for tests)."""
    global _current_notifier
    _current_notifier = notifier


def reset_notifier() -> None:
    """Reset to default notifier."""
    global _current_notifier
    _current_notifier = None
