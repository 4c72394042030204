"""Recipient-side notification operations and the retention purge."""

from datetime import timedelta

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from campus.config import get_settings
from campus.domain import campus
from campus.errors import NotFound, PermissionDenied, Unauthenticated
from campus.notification.notification import Notification
from campus.utils.paging import iter_all
from campus.utils.time import as_utc, utcnow

logger = structlog.get_logger(__name__)


@campus.command(part_of="Notification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    caller_id: Identifier()


@campus.command(part_of="Notification")
class DeleteNotification:
    notification_id: Identifier(required=True)
    caller_id: Identifier()


@campus.command(part_of="Notification")
class PurgeExpiredNotifications:
    """Delete read notifications older than the retention period."""

    as_of: DateTime()


def _load_own_notification(repo, notification_id, caller_id) -> Notification:
    if not caller_id:
        raise Unauthenticated("Must be authenticated")
    try:
        notification = repo.get(str(notification_id))
    except ObjectNotFoundError as exc:
        raise NotFound("Notification not found") from exc
    if str(notification.user_id) != str(caller_id):
        raise PermissionDenied("Notification belongs to another user")
    return notification


@campus.command_handler(part_of=Notification)
class NotificationManagementHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead) -> None:
        repo = current_domain.repository_for(Notification)
        notification = _load_own_notification(repo, command.notification_id, command.caller_id)
        notification.mark_read()
        repo.add(notification)

    @handle(DeleteNotification)
    def delete_notification(self, command: DeleteNotification) -> None:
        repo = current_domain.repository_for(Notification)
        notification = _load_own_notification(repo, command.notification_id, command.caller_id)
        repo._dao.delete(notification)

    @handle(PurgeExpiredNotifications)
    def purge_expired(self, command: PurgeExpiredNotifications) -> int:
        as_of = as_utc(command.as_of) or utcnow()
        cutoff = as_of - timedelta(days=get_settings().retention_days)

        repo = current_domain.repository_for(Notification)
        queryset = repo._dao.query.filter(is_read=True, created_at__lt=cutoff).order_by("created_at")
        expired = list(iter_all(queryset))
        for notification in expired:
            repo._dao.delete(notification)

        logger.info("Expired notifications purged", purged=len(expired), cutoff=cutoff.isoformat())
        return len(expired)
