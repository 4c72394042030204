"""Event lifecycle dispatcher — fans notifications out when events change.

Reacts to the Event aggregate's domain events once the mutation that raised
them has committed:
- EventCreated → ``event_created`` to the resolved audience
- EventUpdated → ``event_updated`` to registrants, if the change is significant
- EventDeleted → ``event_cancelled`` to registrants of the deleted event
- StudentRegistered → ``registration_confirmed`` to the student

The event's creator never receives a notification about their own event.
Failures are logged with the run's correlation id and never propagate: the
triggering mutation has already committed and must not be affected.
"""

import json
from uuid import uuid4

import structlog
from protean.utils.mixins import handle

from campus.domain import campus
from campus.event.event import TargetAudience
from campus.event.events import EventCreated, EventDeleted, EventUpdated, StudentRegistered
from campus.notification.audience import resolve_audience
from campus.notification.fanout import NotificationBatchWriter, NotificationDraft
from campus.notification.notification import Notification, NotificationType
from campus.notification.significance import is_significant

logger = structlog.get_logger(__name__)


def event_link(event_id) -> str:
    return f"/events/{event_id}"


def _registered_students(snapshot: dict) -> set[str]:
    return {str(r["student_id"]) for r in snapshot.get("registrations") or [] if r.get("student_id")}


def _run(trigger: str, event_id, fan_out):
    """Run one fan-out branch and log its outcome.

    ``fan_out(correlation_id)`` returns a ``FanOutResult``, or None when the
    trigger needs no notifications.
    """
    correlation_id = uuid4().hex
    log = logger.bind(trigger=trigger, event_id=str(event_id), correlation_id=correlation_id)

    try:
        result = fan_out(correlation_id)
    except Exception as exc:
        log.error("Notification fan-out aborted", error=str(exc), exc_info=True)
        return None

    if result is None:
        log.info("No notifications required")
    elif result.ok:
        log.info(
            "Notifications fanned out",
            recipients=result.recipients,
            written=result.written,
            batches=result.batches,
        )
    else:
        log.error(
            "Notification fan-out incomplete",
            recipients=result.recipients,
            written=result.written,
            batches=result.batches,
            error=result.error,
        )
    return result


@campus.event_handler(part_of=Notification, stream_category="campus::event")
class EventLifecycleDispatcher:
    """Writes notifications in response to event lifecycle changes."""

    @handle(EventCreated)
    def on_event_created(self, event: EventCreated):
        def fan_out(correlation_id):
            audience = TargetAudience.from_dict({"type": event.audience_type, "value": event.audience_value})
            recipients = resolve_audience(event.institution, audience)
            message = f"New event: {event.title}"
            return NotificationBatchWriter().fan_out(
                recipients,
                lambda user_id: NotificationDraft(
                    user_id,
                    NotificationType.EVENT_CREATED.value,
                    message,
                    event_id=event.event_id,
                    link=event_link(event.event_id),
                ),
                exclude={event.creator_id},
                correlation_id=correlation_id,
            )

        return _run("EventCreated", event.event_id, fan_out)

    @handle(EventUpdated)
    def on_event_updated(self, event: EventUpdated):
        def fan_out(correlation_id):
            before = json.loads(event.before)
            after = json.loads(event.after)
            if not is_significant(before, after):
                return None

            recipients = _registered_students(after)
            if not recipients:
                return None

            message = f'Event "{after["title"]}" has been updated'
            return NotificationBatchWriter().fan_out(
                recipients,
                lambda user_id: NotificationDraft(
                    user_id,
                    NotificationType.EVENT_UPDATED.value,
                    message,
                    event_id=event.event_id,
                    link=event_link(event.event_id),
                ),
                exclude={after.get("creator_id")},
                correlation_id=correlation_id,
            )

        return _run("EventUpdated", event.event_id, fan_out)

    @handle(EventDeleted)
    def on_event_deleted(self, event: EventDeleted):
        def fan_out(correlation_id):
            snapshot = json.loads(event.snapshot)
            recipients = _registered_students(snapshot)
            if not recipients:
                return None

            # The event is gone: no id and no link to follow
            message = f'Event "{snapshot["title"]}" has been cancelled'
            return NotificationBatchWriter().fan_out(
                recipients,
                lambda user_id: NotificationDraft(user_id, NotificationType.EVENT_CANCELLED.value, message),
                exclude={snapshot.get("creator_id")},
                correlation_id=correlation_id,
            )

        return _run("EventDeleted", event.event_id, fan_out)

    @handle(StudentRegistered)
    def on_student_registered(self, event: StudentRegistered):
        def fan_out(correlation_id):
            message = f'You are registered for "{event.title}"'
            return NotificationBatchWriter().fan_out(
                {event.student_id},
                lambda user_id: NotificationDraft(
                    user_id,
                    NotificationType.REGISTRATION_CONFIRMED.value,
                    message,
                    event_id=event.event_id,
                    link=event_link(event.event_id),
                ),
                exclude={event.creator_id},
                correlation_id=correlation_id,
            )

        return _run("StudentRegistered", event.event_id, fan_out)
