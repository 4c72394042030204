"""Application tests for event lifecycle commands.

Event processing is synchronous under the test overlay, so the dispatcher
writes notifications before ``process`` returns.
"""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from campus.errors import NotFound, PermissionDenied, Unauthenticated
from campus.event.event import Event, EventStatus
from campus.event.lifecycle import CreateEvent, DeleteEvent, UpdateEvent
from campus.notification.notification import NotificationType

EVENT_DATE = datetime.now(UTC) + timedelta(days=10)


def _create(caller_id="lecturer-1", caller_role="lecturer", caller_institution="uni-north", **overrides):
    fields = {
        "title": "Careers Fair",
        "date": EVENT_DATE,
        "location": "Main Hall",
        "creator_name": "Dr. Grace Hopper",
    }
    fields.update(overrides)
    command = CreateEvent(
        caller_id=caller_id,
        caller_role=caller_role,
        caller_institution=caller_institution,
        **fields,
    )
    return current_domain.process(command, asynchronous=False)


def _update(event_id, caller_id="lecturer-1", caller_role="lecturer", caller_institution="uni-north", **fields):
    command = UpdateEvent(
        caller_id=caller_id,
        caller_role=caller_role,
        caller_institution=caller_institution,
        event_id=event_id,
        **fields,
    )
    return current_domain.process(command, asynchronous=False)


def _delete(event_id, caller_id="lecturer-1", caller_role="lecturer", caller_institution="uni-north"):
    command = DeleteEvent(
        caller_id=caller_id,
        caller_role=caller_role,
        caller_institution=caller_institution,
        event_id=event_id,
    )
    return current_domain.process(command, asynchronous=False)


class TestCreateEvent:
    def test_lecturer_creates_event_in_own_institution(self):
        event_id = _create()
        event = current_domain.repository_for(Event).get(event_id)
        assert event.institution == "uni-north"
        assert str(event.creator_id) == "lecturer-1"
        assert event.target_audience.audience_type == "general"

    def test_admin_can_create(self):
        assert _create(caller_id="admin-1", caller_role="admin")

    def test_student_cannot_create(self):
        with pytest.raises(PermissionDenied):
            _create(caller_id="stu-1", caller_role="student")

    def test_anonymous_rejected(self):
        with pytest.raises(Unauthenticated):
            _create(caller_id=None)

    def test_targeted_audience_needs_value(self):
        with pytest.raises(ValidationError):
            _create(audience_type="department")

    def test_creation_notifies_audience(self, make_user, notifications_for):
        cs = make_user(department="Computer Science")
        make_user(department="Physics")

        event_id = _create(audience_type="department", audience_value="Computer Science")

        notifications = notifications_for()
        assert [str(n.user_id) for n in notifications] == [str(cs.id)]
        assert notifications[0].notification_type == NotificationType.EVENT_CREATED.value
        assert notifications[0].event_id == event_id


class TestUpdateEvent:
    def test_creator_updates(self):
        event_id = _create()
        assert _update(event_id, location="Room 12") is True
        assert current_domain.repository_for(Event).get(event_id).location == "Room 12"

    def test_unchanged_update_reports_false(self):
        event_id = _create()
        assert _update(event_id, title="Careers Fair") is False

    def test_other_lecturer_forbidden(self):
        event_id = _create()
        with pytest.raises(PermissionDenied):
            _update(event_id, caller_id="lecturer-2", title="Hijacked")

    def test_admin_of_same_institution_allowed(self):
        event_id = _create()
        assert _update(event_id, caller_id="admin-1", caller_role="admin", title="Renamed") is True

    def test_admin_of_other_institution_forbidden(self):
        event_id = _create()
        with pytest.raises(PermissionDenied):
            _update(event_id, caller_id="admin-9", caller_role="admin", caller_institution="uni-south", title="X")

    def test_missing_event(self):
        with pytest.raises(NotFound):
            _update("no-such-event", title="X")

    def test_significant_update_notifies_registrants(self, make_event, notifications_for):
        event = make_event(registrants=["stu-1", "stu-2"])
        _update(str(event.id), date=EVENT_DATE + timedelta(days=1))
        assert len(notifications_for(notification_type=NotificationType.EVENT_UPDATED.value)) == 2

    def test_description_update_is_silent(self, make_event, notifications_for):
        event = make_event(registrants=["stu-1"])
        _update(str(event.id), description="Bring a CV")
        assert notifications_for() == []


class TestDeleteEvent:
    def test_delete_leaves_tombstone(self):
        event_id = _create()
        _delete(event_id)
        assert current_domain.repository_for(Event).get(event_id).status == EventStatus.DELETED.value

    def test_deleted_event_cannot_be_deleted_again(self):
        event_id = _create()
        _delete(event_id)
        with pytest.raises(NotFound):
            _delete(event_id)

    def test_student_cannot_delete(self):
        event_id = _create()
        with pytest.raises(PermissionDenied):
            _delete(event_id, caller_id="stu-1", caller_role="student")

    def test_delete_notifies_registrants(self, make_event, notifications_for):
        event = make_event(registrants=["stu-1", "stu-2"])
        _delete(str(event.id))

        cancelled = notifications_for(notification_type=NotificationType.EVENT_CANCELLED.value)
        assert sorted(str(n.user_id) for n in cancelled) == ["stu-1", "stu-2"]
        assert all(n.link is None for n in cancelled)

    def test_delete_without_registrations_writes_nothing(self, make_event, notifications_for):
        event = make_event()
        _delete(str(event.id))
        assert notifications_for() == []
