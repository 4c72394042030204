"""Tests for the Event aggregate: scheduling, updates, deletion, registrations and feedback."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from campus.errors import AlreadyExists, InvalidArgument, NotFound
from campus.event.event import Event, EventStatus, TargetAudience
from campus.event.events import (
    EventCreated,
    EventDeleted,
    EventUpdated,
    FeedbackSubmitted,
    StudentRegistered,
    StudentUnregistered,
)

EVENT_DATE = datetime(2026, 11, 5, 10, 0, tzinfo=UTC)


def _make_event(**overrides):
    defaults = {
        "title": "Careers Fair",
        "date": EVENT_DATE,
        "location": "Main Hall",
        "creator_id": "lecturer-1",
        "institution": "uni-north",
    }
    defaults.update(overrides)
    return Event.schedule(**defaults)


def _scheduled_event(**overrides):
    event = _make_event(**overrides)
    event._events.clear()
    return event


class TestEventScheduling:
    def test_schedule_defaults_to_general_audience(self):
        event = _make_event()
        assert event.target_audience.audience_type == "general"
        assert event.target_audience.value is None

    def test_schedule_sets_status_scheduled(self):
        event = _make_event()
        assert event.status == EventStatus.SCHEDULED.value
        assert event.is_deleted is False

    def test_schedule_raises_event_created(self):
        event = _make_event(target_audience=TargetAudience.department("Physics"))
        assert len(event._events) == 1
        raised = event._events[0]
        assert isinstance(raised, EventCreated)
        assert raised.title == "Careers Fair"
        assert raised.audience_type == "department"
        assert raised.audience_value == "Physics"
        assert raised.creator_id == "lecturer-1"


class TestEventUpdates:
    def test_update_with_no_changes_returns_false(self):
        event = _scheduled_event()
        assert event.update_details(title="Careers Fair") is False
        assert event._events == []

    def test_update_raises_before_and_after_snapshots(self):
        event = _scheduled_event()
        assert event.update_details(location="Room 12") is True

        raised = event._events[0]
        assert isinstance(raised, EventUpdated)
        assert json.loads(raised.before)["location"] == "Main Hall"
        assert json.loads(raised.after)["location"] == "Room 12"

    def test_snapshot_carries_registrations(self):
        event = _scheduled_event()
        event.register("stu-1", "Ada", "ada@uni.example")
        event._events.clear()

        event.update_details(description="Now with free coffee")
        after = json.loads(event._events[0].after)
        assert after["registrations"] == [
            {"student_id": "stu-1", "student_name": "Ada", "student_email": "ada@uni.example"}
        ]

    def test_same_instant_in_another_offset_is_no_change(self):
        event = _scheduled_event()
        same_instant = EVENT_DATE.astimezone(timezone(timedelta(hours=2)))
        assert event.update_details(date=same_instant) is False
        assert event._events == []

    def test_snapshot_date_is_utc(self):
        event = _scheduled_event(date=EVENT_DATE.astimezone(timezone(timedelta(hours=-5))))
        assert event.snapshot()["date"] == "2026-11-05T10:00:00+00:00"

    def test_update_audience(self):
        event = _scheduled_event()
        event.update_details(target_audience=TargetAudience.for_class("CS-2026"))
        assert event.target_audience.audience_type == "class"
        assert event.target_audience.value == "CS-2026"


class TestEventDeletion:
    def test_delete_marks_tombstone(self):
        event = _scheduled_event()
        event.delete(deleted_by="lecturer-1")
        assert event.is_deleted is True

    def test_delete_raises_snapshot(self):
        event = _scheduled_event()
        event.register("stu-1", "Ada", "ada@uni.example")
        event._events.clear()

        event.delete(deleted_by="admin-1")
        raised = event._events[0]
        assert isinstance(raised, EventDeleted)
        snapshot = json.loads(raised.snapshot)
        assert snapshot["title"] == "Careers Fair"
        assert [r["student_id"] for r in snapshot["registrations"]] == ["stu-1"]
        assert raised.deleted_by == "admin-1"

    def test_delete_twice_is_not_found(self):
        event = _scheduled_event()
        event.delete(deleted_by="lecturer-1")
        with pytest.raises(NotFound):
            event.delete(deleted_by="lecturer-1")


class TestRegistrations:
    def test_register_adds_registration(self):
        event = _scheduled_event()
        event.register("stu-1", "Ada", "ada@uni.example")
        assert event.registered_student_ids() == ["stu-1"]
        assert isinstance(event._events[-1], StudentRegistered)

    def test_duplicate_registration_rejected(self):
        event = _scheduled_event()
        event.register("stu-1", "Ada", "ada@uni.example")
        with pytest.raises(AlreadyExists):
            event.register("stu-1", "Ada", "ada@uni.example")
        assert len(event.registrations) == 1

    def test_registration_order_preserved(self):
        event = _scheduled_event()
        for student_id in ("stu-3", "stu-1", "stu-2"):
            event.register(student_id, student_id, f"{student_id}@uni.example")
        assert event.registered_student_ids() == ["stu-3", "stu-1", "stu-2"]

    def test_unregister_removes_registration(self):
        event = _scheduled_event()
        event.register("stu-1", "Ada", "ada@uni.example")
        event.unregister("stu-1")
        assert event.registered_student_ids() == []
        assert isinstance(event._events[-1], StudentUnregistered)

    def test_unregister_without_registration_is_not_found(self):
        event = _scheduled_event()
        with pytest.raises(NotFound):
            event.unregister("stu-1")


class TestFeedback:
    def test_submit_feedback(self):
        event = _scheduled_event()
        event.submit_feedback("stu-1", "Ada", 4, "Great talk")
        assert len(event.feedback) == 1
        assert isinstance(event._events[-1], FeedbackSubmitted)

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_out_of_range_rejected(self, rating):
        event = _scheduled_event()
        with pytest.raises(InvalidArgument):
            event.submit_feedback("stu-1", "Ada", rating)

    @pytest.mark.parametrize("rating", ["abc", None, "4.5"])
    def test_non_numeric_rating_rejected(self, rating):
        event = _scheduled_event()
        with pytest.raises(InvalidArgument):
            event.submit_feedback("stu-1", "Ada", rating)
        assert event.feedback == []

    def test_duplicate_feedback_rejected(self):
        event = _scheduled_event()
        event.submit_feedback("stu-1", "Ada", 5)
        with pytest.raises(AlreadyExists):
            event.submit_feedback("stu-1", "Ada", 3)

    def test_average_rating_rounded(self):
        event = _scheduled_event()
        event.submit_feedback("stu-1", "Ada", 5)
        event.submit_feedback("stu-2", "Alan", 4)
        event.submit_feedback("stu-3", "Grace", 4)
        assert event.average_rating == 4.33

    def test_average_rating_without_feedback(self):
        assert _scheduled_event().average_rating == 0.0


def test_event_date_can_move():
    event = _scheduled_event()
    new_date = EVENT_DATE + timedelta(days=1)
    event.update_details(date=new_date)
    assert json.loads(event._events[0].after)["date"] == new_date.isoformat()
