"""Domain events for the Event aggregate.

These are the change events the notification fan-out consumes. Snapshots are
JSON documents produced by ``Event.snapshot()`` so a consumer sees the event
exactly as it was before and after the mutation.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from campus.domain import campus


@campus.event(part_of="Event")
class EventCreated:
    """A lecturer or admin scheduled a new event."""

    __version__ = "v1"

    event_id: Identifier(required=True)
    title: String(required=True)
    date: DateTime(required=True)
    location: String(required=True)
    creator_id: Identifier(required=True)
    creator_name: String()
    institution: String(required=True)
    audience_type: String(required=True)
    audience_value: String()
    created_at: DateTime(required=True)


@campus.event(part_of="Event")
class EventUpdated:
    """Event details changed. Carries the full before/after snapshots."""

    __version__ = "v1"

    event_id: Identifier(required=True)
    before: Text(required=True)  # JSON snapshot
    after: Text(required=True)  # JSON snapshot
    updated_at: DateTime(required=True)


@campus.event(part_of="Event")
class EventDeleted:
    """An event was deleted. Carries the last snapshot, registrations included."""

    __version__ = "v1"

    event_id: Identifier(required=True)
    snapshot: Text(required=True)  # JSON snapshot
    deleted_by: Identifier(required=True)
    deleted_at: DateTime(required=True)


@campus.event(part_of="Event")
class StudentRegistered:
    """A student registered for an event."""

    __version__ = "v1"

    event_id: Identifier(required=True)
    student_id: Identifier(required=True)
    student_name: String()
    title: String(required=True)
    creator_id: Identifier()
    registered_at: DateTime(required=True)


@campus.event(part_of="Event")
class StudentUnregistered:
    """A student withdrew their registration."""

    __version__ = "v1"

    event_id: Identifier(required=True)
    student_id: Identifier(required=True)
    unregistered_at: DateTime(required=True)


@campus.event(part_of="Event")
class FeedbackSubmitted:
    """A student rated an event."""

    __version__ = "v1"

    event_id: Identifier(required=True)
    student_id: Identifier(required=True)
    rating: Integer(required=True)
    submitted_at: DateTime(required=True)
