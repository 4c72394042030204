"""Notification store registry.

Provides singleton access to the store that commits notification batches.
``repository`` (the default) writes through the domain's repository inside a
unit of work; ``fake`` records batches in memory for tests.
"""

from campus.config import get_settings

_instance = None


def get_notification_store():
    """Return the configured notification store (singleton)."""
    global _instance
    if _instance is None:
        store = get_settings().notification_store
        if store == "repository":
            from campus.notification.store.repository import RepositoryNotificationStore

            _instance = RepositoryNotificationStore()
        elif store == "fake":
            from campus.notification.store.fake import FakeNotificationStore

            _instance = FakeNotificationStore()
        else:
            raise ValueError(f"Unknown notification store: {store}")
    return _instance


def set_notification_store(store) -> None:
    """Install a specific notification store."""
    global _instance
    _instance = store


def reset_notification_store():
    """Reset the store singleton (useful for testing)."""
    global _instance
    _instance = None
