"""Fake notification store — records committed batches in memory."""

from campus.errors import Internal
from campus.notification.store.port import NotificationStorePort


class FakeNotificationStore(NotificationStorePort):
    """Store that keeps every committed batch for test assertions.

    ``fail_on_commit`` makes the Nth commit call (1-based) raise without
    recording anything, to exercise partial fan-out failures.
    """

    def __init__(self, fail_on_commit: int | None = None):
        self.batches: list[list] = []
        self.commit_calls = 0
        self.fail_on_commit = fail_on_commit

    def commit(self, notifications: list) -> None:
        self.commit_calls += 1
        if self.fail_on_commit is not None and self.commit_calls == self.fail_on_commit:
            raise Internal(f"Batch commit {self.commit_calls} failed")
        self.batches.append(list(notifications))

    @property
    def notifications(self) -> list:
        return [notification for batch in self.batches for notification in batch]
