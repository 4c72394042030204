"""Notification aggregate — one durable message for one recipient.

Notifications are written only by the fan-out engine. Afterwards they belong
to their recipient, who may mark them read or delete them; read notifications
are purged once they pass the retention period.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from campus.domain import campus
from campus.notification.events import NotificationCreated, NotificationRead


class NotificationType(Enum):
    EVENT_CREATED = "event_created"
    EVENT_UPDATED = "event_updated"
    EVENT_CANCELLED = "event_cancelled"
    EVENT_REMINDER = "event_reminder"
    REGISTRATION_CONFIRMED = "registration_confirmed"


@campus.aggregate
class Notification:
    """A message addressed to a single user about a single event."""

    user_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)
    message: Text(required=True)

    # Absent for cancellations: the event no longer exists
    event_id: Identifier()
    link: String(max_length=500)

    is_read: Boolean(default=False)
    read_at: DateTime()
    created_at: DateTime()

    @classmethod
    def create(cls, user_id, notification_type, message, event_id=None, link=None, created_at=None):
        """Create an unread notification."""
        now = created_at or datetime.now(UTC)

        notification = cls(
            user_id=user_id,
            notification_type=notification_type,
            message=message,
            event_id=event_id,
            link=link,
            is_read=False,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=str(user_id),
                notification_type=notification_type,
                event_id=str(event_id) if event_id else None,
                created_at=now,
            )
        )
        return notification

    def mark_read(self):
        """Mark the notification read. Marking it again changes nothing."""
        if self.is_read:
            return

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                read_at=now,
            )
        )

    def to_record(self) -> dict:
        """The persisted record shape; ``eventId``/``link`` are omitted when absent."""
        record = {
            "id": str(self.id),
            "userId": str(self.user_id),
            "type": self.notification_type,
            "message": self.message,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if self.event_id:
            record["eventId"] = str(self.event_id)
        if self.link:
            record["link"] = self.link
        return record
