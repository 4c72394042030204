"""Domain events for the Notification aggregate.

``NotificationCreated`` is the hand-off point for downstream delivery
(email, push); those consumers live outside this context.
"""

from protean.fields import DateTime, Identifier, String

from campus.domain import campus


@campus.event(part_of="Notification")
class NotificationCreated:
    """A notification record was written for a recipient."""

    __version__ = "v1"

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    event_id: Identifier()
    created_at: DateTime(required=True)


@campus.event(part_of="Notification")
class NotificationRead:
    """The recipient marked a notification as read."""

    __version__ = "v1"

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    read_at: DateTime(required=True)
