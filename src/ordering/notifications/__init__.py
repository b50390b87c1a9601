"""Notifier / mailer registry.

Fake adapters are the default; a deployment installs real ones at startup
with ``set_notifier`` / ``set_mailer``.
"""

from ordering.notifications.fake_adapter import FakeMailer, FakeNotifier
from ordering.notifications.port import MailerPort, NotificationPort

_current_notifier: NotificationPort | None = None
_current_mailer: MailerPort | None = None


def get_notifier() -> NotificationPort:
    global _current_notifier
    if _current_notifier is None:
        _current_notifier = FakeNotifier()
    return _current_notifier


def set_notifier(notifier: NotificationPort) -> None:
    global _current_notifier
    _current_notifier = notifier


def get_mailer() -> MailerPort:
    global _current_mailer
    if _current_mailer is None:
        _current_mailer = FakeMailer()
    return _current_mailer


def set_mailer(mailer: MailerPort) -> None:
    global _current_mailer
    _current_mailer = mailer


def reset_notifications() -> None:
    """Drop the installed adapters; the next access creates fresh fakes."""
    global _current_notifier, _current_mailer
    _current_notifier = None
    _current_mailer = None
