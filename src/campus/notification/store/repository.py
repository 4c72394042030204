"""Repository-backed notification store."""

from protean import UnitOfWork
from protean.utils.globals import current_domain

from campus.notification.notification import Notification
from campus.notification.store.port import NotificationStorePort


class RepositoryNotificationStore(NotificationStorePort):
    """Writes each batch through the Notification repository in its own unit of work."""

    def commit(self, notifications: list) -> None:
        with UnitOfWork():
            repo = current_domain.repository_for(Notification)
            for notification in notifications:
                repo.add(notification)
