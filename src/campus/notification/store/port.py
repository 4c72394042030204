"""Notification store port — the interface every store must implement."""

from abc import ABC, abstractmethod


class NotificationStorePort(ABC):
    """Commits one batch of notifications atomically."""

    @abstractmethod
    def commit(self, notifications: list) -> None:
        """Persist every notification in the batch, or none of them.

        Raises on failure; a failed commit must leave no partial batch behind.
        """
