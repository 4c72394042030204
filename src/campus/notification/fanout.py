"""Notification batch writer.

Turns a recipient set into notification records and commits them in
sequential chunks, each chunk atomic on its own. A failed chunk stops the
run: earlier chunks stay committed and later ones are never attempted. The
outcome is returned as a ``FanOutResult`` rather than raised, so a caller
reacting to a committed change can log it without undoing that change.
"""

from uuid import uuid4

import structlog

from campus.config import get_settings
from campus.notification.notification import Notification
from campus.notification.store import get_notification_store
from campus.utils.time import utcnow

logger = structlog.get_logger(__name__)


class NotificationDraft:
    """A notification that has not been written yet."""

    def __init__(self, user_id, notification_type, message, event_id=None, link=None):
        self.user_id = str(user_id)
        self.notification_type = notification_type
        self.message = message
        self.event_id = str(event_id) if event_id else None
        self.link = link

    def __repr__(self) -> str:
        return f"NotificationDraft(user_id={self.user_id!r}, notification_type={self.notification_type!r})"

    def build(self, created_at=None) -> Notification:
        return Notification.create(
            user_id=self.user_id,
            notification_type=self.notification_type,
            message=self.message,
            event_id=self.event_id,
            link=self.link,
            created_at=created_at,
        )


class FanOutResult:
    """Outcome of one fan-out run.

    Attributes:
        correlation_id: Ties together every log line of the run.
        recipients: Number of notifications the run set out to write.
        written: Number of notifications in committed batches.
        batches: Number of committed batches.
        error: Message of the failure that stopped the run, if any.
    """

    def __init__(self, correlation_id=None, recipients: int = 0, written: int = 0, batches: int = 0, error=None):
        self.correlation_id = correlation_id or uuid4().hex
        self.recipients = recipients
        self.written = written
        self.batches = batches
        self.error = error

    def __repr__(self) -> str:
        return (
            f"FanOutResult(correlation_id={self.correlation_id!r}, recipients={self.recipients}, "
            f"written={self.written}, batches={self.batches}, error={self.error!r})"
        )

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "correlation_id": self.correlation_id,
            "recipients": self.recipients,
            "written": self.written,
            "batches": self.batches,
            "ok": self.ok,
            "error": self.error,
        }


class NotificationBatchWriter:
    """Writes notifications in atomic chunks of at most ``batch_limit`` records."""

    def __init__(self, store=None, batch_limit: int | None = None):
        self.store = store or get_notification_store()
        self.batch_limit = batch_limit or get_settings().batch_limit
        if self.batch_limit <= 0:
            raise ValueError("batch_limit must be positive")

    def fan_out(self, recipients, factory, exclude=None, correlation_id=None) -> FanOutResult:
        """Write one notification per recipient, built by ``factory(user_id)``.

        Recipients are de-duplicated and anyone in ``exclude`` is skipped.
        """
        excluded = {str(user_id) for user_id in (exclude or ()) if user_id}
        targets = sorted({str(user_id) for user_id in recipients if user_id} - excluded)
        return self.write([factory(user_id) for user_id in targets], correlation_id=correlation_id)

    def write(self, drafts, correlation_id=None) -> FanOutResult:
        """Commit ``drafts`` chunk by chunk, stopping at the first failed chunk."""
        drafts = list(drafts)
        result = FanOutResult(correlation_id=correlation_id, recipients=len(drafts))
        if not drafts:
            return result

        for start in range(0, len(drafts), self.batch_limit):
            chunk = drafts[start : start + self.batch_limit]
            try:
                created_at = utcnow()
                self.store.commit([draft.build(created_at) for draft in chunk])
            except Exception as exc:
                result.error = str(exc) or exc.__class__.__name__
                logger.error(
                    "Notification batch failed",
                    correlation_id=result.correlation_id,
                    batch=result.batches + 1,
                    batch_size=len(chunk),
                    written=result.written,
                    error=result.error,
                )
                return result

            result.batches += 1
            result.written += len(chunk)
            logger.debug(
                "Notification batch committed",
                correlation_id=result.correlation_id,
                batch=result.batches,
                batch_size=len(chunk),
            )

        return result
