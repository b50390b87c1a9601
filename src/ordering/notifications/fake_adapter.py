"""Fake notifier and mailer — record everything in memory for test assertions."""

from uuid import uuid4

from ordering.notifications.port import MailerPort, NotificationPort, NotificationType


class FakeNotifier(NotificationPort):
    def __init__(self) -> None:
        self.sent_notifications: list[dict] = []

    def send_admin_notification(
        self,
        notification_type: NotificationType,
        order_id: str,
        sender_id: str | None = None,
    ) -> None:
        self.sent_notifications.append(
            {
                "audience": "admin",
                "type": notification_type.value,
                "order_id": order_id,
                "sender_id": sender_id,
            }
        )

    def send_user_notification(
        self,
        notification_type: NotificationType,
        order_id: str,
        user_id: str,
    ) -> None:
        self.sent_notifications.append(
            {
                "audience": "user",
                "type": notification_type.value,
                "order_id": order_id,
                "user_id": user_id,
            }
        )

    def of_type(self, notification_type: NotificationType) -> list[dict]:
        return [n for n in self.sent_notifications if n["type"] == notification_type.value]

    def reset(self) -> None:
        self.sent_notifications.clear()


class FakeMailer(MailerPort):
    def __init__(self) -> None:
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, to: str, subject: str, body: str) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append({"message_id": message_id, "to": to, "subject": subject, "body": body})
        return {"message_id": message_id, "status": "sent"}

    def reset(self) -> None:
        self.sent_emails.clear()
        self.should_succeed = True
