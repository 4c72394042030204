"""Shared BDD fixtures and step definitions for the campus domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from campus.errors import CampusError
from campus.event.event import Event
from campus.notification.notification import Notification


@pytest.fixture()
def error():
    """Container for the error raised by the last request."""
    return {"exc": None}


def _names(raw):
    return [name.strip() for name in raw.split(",") if name.strip()]


def _notifications(user_id=None):
    query = current_domain.repository_for(Notification)._dao.query
    if user_id is not None:
        query = query.filter(user_id=user_id)
    return query.all().items


@pytest.fixture()
def attempt(error):
    """Run an action and capture a campus error instead of raising it."""

    def _run(action):
        try:
            action()
        except CampusError as exc:
            error["exc"] = exc

    return _run


# ---------------------------------------------------------------------------
# Given steps — events
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a scheduled event "{title}" in institution "{institution}"'),
    target_fixture="event_id",
)
def scheduled_event(make_event, title, institution):
    return str(make_event(title=title, institution=institution).id)


@given(
    parsers.cfparse('an event by "{creator_id}" with registrants "{registrants}"'),
    target_fixture="event_id",
)
def event_with_registrants(make_event, creator_id, registrants):
    return str(make_event(creator_id=creator_id, registrants=_names(registrants)).id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request fails with "{code}"'))
def request_fails(error, code):
    assert error["exc"] is not None
    assert error["exc"].code == code


@then(parsers.re(r"the event has (?P<count>\d+) registrations?"))
def registration_count(event_id, count):
    assert len(current_domain.repository_for(Event).get(event_id).registrations) == int(count)


@then(parsers.cfparse('student "{student_id}" receives a "{notification_type}" notification'))
def student_notified(student_id, notification_type):
    assert [n.notification_type for n in _notifications(student_id)] == [notification_type]


@then(parsers.cfparse('students "{students}" each receive a "{notification_type}" notification'))
def students_notified(students, notification_type):
    for student_id in _names(students):
        assert [n.notification_type for n in _notifications(student_id)] == [notification_type]


@then(parsers.cfparse('student "{student_id}" receives no notification'))
def student_not_notified(student_id):
    assert _notifications(student_id) == []


@then("no notifications are written")
def nothing_written():
    assert _notifications() == []
