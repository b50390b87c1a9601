"""Notification and mailer ports (abstract interfaces).

``NotificationPort`` delivers in-app notifications to administrators or to a
single user; ``MailerPort`` sends e-mail to addresses that have no account
(guests). Fake adapters are used for development and tests.
"""

from abc import ABC, abstractmethod
from enum import Enum


class NotificationType(Enum):
    NEW_ORDER = "new_order"
    ORDER_CANCELED = "order_canceled"
    ORDER_SET_TO_REVIEW = "order_set_to_review"
    ORDER_FINISHED = "order_finished"


class NotificationPort(ABC):
    @abstractmethod
    def send_admin_notification(
        self,
        notification_type: NotificationType,
        order_id: str,
        sender_id: str | None = None,
    ) -> None:
        """Notify every administrator about an order event."""
        ...

    @abstractmethod
    def send_user_notification(
        self,
        notification_type: NotificationType,
        order_id: str,
        user_id: str,
    ) -> None:
        """Notify a single registered user about their order."""
        ...


class MailerPort(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> dict:
        """Send an e-mail.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
