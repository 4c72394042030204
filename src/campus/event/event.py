"""Event aggregate root with Registration and Feedback entities and the TargetAudience value object.

An Event is a scheduled happening (seminar, fair, workshop) owned by the
institution of the lecturer or admin who created it. Students register for
it and, afterwards, leave feedback. Every mutation raises a domain event; the
notification fan-out reacts to those events after the mutation has committed.

State Machine:
    SCHEDULED → DELETED  (tombstone; deleted events are invisible to reads)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from campus.domain import campus
from campus.errors import AlreadyExists, InvalidArgument, NotFound
from campus.utils.time import as_utc

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

MIN_RATING = 1
MAX_RATING = 5


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class AudienceType(Enum):
    GENERAL = "general"
    DEPARTMENT = "department"
    CLASS = "class"


class EventStatus(Enum):
    SCHEDULED = "Scheduled"
    DELETED = "Deleted"


# ---------------------------------------------------------------------------
# Value Objects & Entities
# ---------------------------------------------------------------------------
@campus.value_object(part_of="Event")
class TargetAudience:
    """Who an event is aimed at: the whole institution, one department, or one class.

    ``General`` carries no value; ``Department`` and ``Class`` require one.
    """

    audience_type: String(choices=AudienceType, required=True)
    value: String(max_length=200)

    @invariant.post
    def value_matches_audience_type(self):
        if self.audience_type == AudienceType.GENERAL.value:
            if self.value:
                raise ValidationError({"target_audience": ["A general audience does not take a value"]})
        elif not self.value:
            raise ValidationError({"target_audience": [f"A {self.audience_type} audience requires a value"]})

    @classmethod
    def general(cls):
        return cls(audience_type=AudienceType.GENERAL.value)

    @classmethod
    def department(cls, value):
        return cls(audience_type=AudienceType.DEPARTMENT.value, value=value)

    @classmethod
    def for_class(cls, value):
        return cls(audience_type=AudienceType.CLASS.value, value=value)

    @classmethod
    def from_dict(cls, data):
        audience_type = data.get("type") or AudienceType.GENERAL.value
        value = data.get("value") or None
        if audience_type == AudienceType.GENERAL.value:
            value = None
        return cls(audience_type=audience_type, value=value)

    def to_dict(self):
        return {"type": self.audience_type, "value": self.value}


@campus.entity(part_of="Event")
class Registration:
    """A student's place at an event. Appended on registration, removed on unregistration."""

    student_id: Identifier(required=True)
    student_name: String(required=True, max_length=200)
    student_email: String(required=True, max_length=254)
    registered_at: DateTime()


@campus.entity(part_of="Event")
class Feedback:
    """A student's rating of an event. At most one per student."""

    student_id: Identifier(required=True)
    student_name: String(required=True, max_length=200)
    rating: Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    comment: Text()
    submitted_at: DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@campus.aggregate
class Event:
    """A scheduled happening within one institution.

    Registrations and feedback are keyed by student id: a student appears at
    most once in each list. The lists keep their registration/submission order
    for display.
    """

    title: String(required=True, max_length=200)
    description: Text()
    date: DateTime(required=True)
    location: String(required=True, max_length=255)

    creator_id: Identifier(required=True)
    creator_name: String(max_length=200)
    institution: String(required=True, max_length=200)
    target_audience: ValueObject(TargetAudience, required=True)

    registrations: HasMany(Registration)
    feedback: HasMany(Feedback)

    status: String(choices=EventStatus, default=EventStatus.SCHEDULED.value)

    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def one_registration_per_student(self):
        student_ids = [str(r.student_id) for r in self.registrations]
        if len(student_ids) != len(set(student_ids)):
            raise ValidationError({"registrations": ["A student can register only once"]})

    @invariant.post
    def one_feedback_per_student(self):
        student_ids = [str(f.student_id) for f in self.feedback]
        if len(student_ids) != len(set(student_ids)):
            raise ValidationError({"feedback": ["A student can submit feedback only once"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def schedule(
        cls,
        title,
        date,
        location,
        creator_id,
        institution,
        target_audience=None,
        description=None,
        creator_name=None,
    ):
        from campus.event.events import EventCreated

        now = datetime.now(UTC)
        audience = target_audience or TargetAudience.general()

        event = cls(
            title=title,
            description=description,
            date=date,
            location=location,
            creator_id=creator_id,
            creator_name=creator_name,
            institution=institution,
            target_audience=audience,
            status=EventStatus.SCHEDULED.value,
            created_at=now,
            updated_at=now,
        )
        event.raise_(
            EventCreated(
                event_id=str(event.id),
                title=title,
                date=date,
                location=location,
                creator_id=str(creator_id),
                creator_name=creator_name,
                institution=institution,
                audience_type=audience.audience_type,
                audience_value=audience.value,
                created_at=now,
            )
        )
        return event

    # -------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------
    @property
    def is_deleted(self) -> bool:
        return self.status == EventStatus.DELETED.value

    def _registrations_by_student(self):
        ordered = sorted(self.registrations, key=lambda r: r.registered_at or self.created_at)
        return {str(r.student_id): r for r in ordered}

    def _feedback_by_student(self):
        return {str(f.student_id): f for f in self.feedback}

    def registration_for(self, student_id):
        return self._registrations_by_student().get(str(student_id))

    def registered_student_ids(self):
        return list(self._registrations_by_student())

    @property
    def average_rating(self) -> float:
        if not self.feedback:
            return 0.0
        return round(sum(f.rating for f in self.feedback) / len(self.feedback), 2)

    def snapshot(self) -> dict:
        """Plain-data view of the event as carried by lifecycle events."""
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "date": as_utc(self.date).isoformat() if self.date else None,
            "location": self.location,
            "creator_id": str(self.creator_id),
            "creator_name": self.creator_name,
            "institution": self.institution,
            "target_audience": self.target_audience.to_dict() if self.target_audience else None,
            "registrations": [
                {
                    "student_id": str(r.student_id),
                    "student_name": r.student_name,
                    "student_email": r.student_email,
                }
                for r in self._registrations_by_student().values()
            ],
        }

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def update_details(
        self,
        title=_UNSET,
        description=_UNSET,
        date=_UNSET,
        location=_UNSET,
        target_audience=_UNSET,
    ) -> bool:
        """Apply a partial update. Returns False when nothing changed."""
        from campus.event.events import EventUpdated

        before = self.snapshot()

        if title is not _UNSET:
            self.title = title
        if description is not _UNSET:
            self.description = description
        if date is not _UNSET:
            self.date = date
        if location is not _UNSET:
            self.location = location
        if target_audience is not _UNSET:
            self.target_audience = target_audience

        after = self.snapshot()
        if before == after:
            return False

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            EventUpdated(
                event_id=str(self.id),
                before=json.dumps(before),
                after=json.dumps(after),
                updated_at=now,
            )
        )
        return True

    def delete(self, deleted_by):
        from campus.event.events import EventDeleted

        if self.is_deleted:
            raise NotFound(f"Event {self.id} not found")

        snapshot = self.snapshot()
        now = datetime.now(UTC)
        self.status = EventStatus.DELETED.value
        self.updated_at = now
        self.raise_(
            EventDeleted(
                event_id=str(self.id),
                snapshot=json.dumps(snapshot),
                deleted_by=str(deleted_by),
                deleted_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Registration & feedback
    # -------------------------------------------------------------------
    def register(self, student_id, student_name, student_email):
        from campus.event.events import StudentRegistered

        if self.registration_for(student_id) is not None:
            raise AlreadyExists("Already registered for this event")

        now = datetime.now(UTC)
        self.add_registrations(
            Registration(
                student_id=str(student_id),
                student_name=student_name,
                student_email=student_email,
                registered_at=now,
            )
        )
        self.updated_at = now
        self.raise_(
            StudentRegistered(
                event_id=str(self.id),
                student_id=str(student_id),
                student_name=student_name,
                title=self.title,
                creator_id=str(self.creator_id),
                registered_at=now,
            )
        )

    def unregister(self, student_id):
        from campus.event.events import StudentUnregistered

        registration = self.registration_for(student_id)
        if registration is None:
            raise NotFound("Registration not found")

        now = datetime.now(UTC)
        self.remove_registrations(registration)
        self.updated_at = now
        self.raise_(
            StudentUnregistered(
                event_id=str(self.id),
                student_id=str(student_id),
                unregistered_at=now,
            )
        )

    def submit_feedback(self, student_id, student_name, rating, comment=None):
        from campus.event.events import FeedbackSubmitted

        try:
            rating = int(rating)
        except (TypeError, ValueError) as exc:
            raise InvalidArgument(f"Rating must be between {MIN_RATING} and {MAX_RATING}") from exc
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidArgument(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        if str(student_id) in self._feedback_by_student():
            raise AlreadyExists("Feedback already submitted")

        now = datetime.now(UTC)
        self.add_feedback(
            Feedback(
                student_id=str(student_id),
                student_name=student_name,
                rating=rating,
                comment=comment,
                submitted_at=now,
            )
        )
        self.updated_at = now
        self.raise_(
            FeedbackSubmitted(
                event_id=str(self.id),
                student_id=str(student_id),
                rating=rating,
                submitted_at=now,
            )
        )
