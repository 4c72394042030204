"""Reminder sweep — reminds registrants of events starting soon.

Run on a schedule (see ``src/reminders.py``). Each run looks at events dated
within the reminder window after ``as_of`` and writes one reminder per
registration, all through a single batch write. Runs are not deduplicated: an
event near the edge of two consecutive windows may be reminded twice.
"""

from datetime import timedelta
from uuid import uuid4

import structlog
from protean.fields import DateTime
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from campus.config import get_settings
from campus.domain import campus
from campus.event.event import Event, EventStatus
from campus.notification.fanout import FanOutResult, NotificationBatchWriter, NotificationDraft
from campus.notification.lifecycle import event_link
from campus.notification.notification import Notification, NotificationType
from campus.utils.paging import iter_all
from campus.utils.time import as_utc, utcnow

logger = structlog.get_logger(__name__)


@campus.command(part_of="Notification")
class SendEventReminders:
    """Send reminders for events in the window starting at ``as_of`` (now if omitted)."""

    as_of: DateTime()


def events_in_window(start, end) -> list[Event]:
    """Scheduled events dated within ``[start, end]``, soonest first."""
    queryset = (
        current_domain.repository_for(Event)
        ._dao.query.filter(status=EventStatus.SCHEDULED.value, date__gte=start, date__lte=end)
        .order_by("date")
    )
    return list(iter_all(queryset))


def reminder_drafts(event: Event) -> list[NotificationDraft]:
    message = f'Reminder: "{event.title}" is happening soon!'
    creator_id = str(event.creator_id)
    return [
        NotificationDraft(
            student_id,
            NotificationType.EVENT_REMINDER.value,
            message,
            event_id=event.id,
            link=event_link(event.id),
        )
        for student_id in event.registered_student_ids()
        if student_id != creator_id
    ]


@campus.command_handler(part_of=Notification)
class EventReminderHandler:
    @handle(SendEventReminders)
    def send_reminders(self, command: SendEventReminders) -> FanOutResult:
        as_of = as_utc(command.as_of) or utcnow()
        window_end = as_of + timedelta(hours=get_settings().reminder_window_hours)
        correlation_id = uuid4().hex
        log = logger.bind(trigger="SendEventReminders", correlation_id=correlation_id)

        try:
            events = events_in_window(as_of, window_end)
        except Exception as exc:
            log.error("Reminder sweep aborted", error=str(exc), exc_info=True)
            return FanOutResult(correlation_id=correlation_id, error=str(exc))

        if not events:
            log.info("No events in reminder window", window_start=as_of.isoformat(), window_end=window_end.isoformat())
            return FanOutResult(correlation_id=correlation_id)

        drafts = [draft for event in events for draft in reminder_drafts(event)]
        result = NotificationBatchWriter().write(drafts, correlation_id=correlation_id)

        if result.ok:
            log.info("Event reminders sent", events=len(events), written=result.written, batches=result.batches)
        else:
            log.error(
                "Event reminders incomplete",
                events=len(events),
                recipients=result.recipients,
                written=result.written,
                error=result.error,
            )
        return result
