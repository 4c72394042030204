"""Read-side access to a user's notifications."""

from protean.utils.globals import current_domain

from campus.notification.notification import Notification

DEFAULT_LIMIT = 50


def list_notifications(user_id, limit: int = DEFAULT_LIMIT) -> list[Notification]:
    """A user's notifications, newest first."""
    return (
        current_domain.repository_for(Notification)
        ._dao.query.filter(user_id=str(user_id))
        .order_by("-created_at")
        .limit(limit)
        .all()
        .items
    )


def unread_count(user_id) -> int:
    return (
        current_domain.repository_for(Notification)._dao.query.filter(user_id=str(user_id), is_read=False).all().total
    )
