"""BDD tests for event registration and feedback."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from campus.event.event import Event
from campus.event.feedback import SubmitFeedback
from campus.event.registration import RegisterForEvent, UnregisterFromEvent

scenarios("features/event_registration.feature")


def _caller(student_id, institution):
    return {"caller_id": student_id, "caller_role": "student", "caller_institution": institution}


def _register(event_id, student_id, institution):
    command = RegisterForEvent(
        **_caller(student_id, institution),
        event_id=event_id,
        student_name=f"Student {student_id}",
        student_email=f"{student_id}@{institution}.example",
    )
    current_domain.process(command, asynchronous=False)


def _rate(event_id, student_id, institution, rating):
    command = SubmitFeedback(
        **_caller(student_id, institution),
        event_id=event_id,
        student_name=f"Student {student_id}",
        rating=rating,
    )
    current_domain.process(command, asynchronous=False)


@given(parsers.cfparse('student "{student_id}" of "{institution}" registered for the event'))
def registered(event_id, student_id, institution):
    _register(event_id, student_id, institution)


@given(parsers.cfparse('student "{student_id}" of "{institution}" rated the event {rating:d}'))
def rated(event_id, student_id, institution, rating):
    _rate(event_id, student_id, institution, rating)


@when(parsers.cfparse('student "{student_id}" of "{institution}" registers for the event'))
def register(attempt, event_id, student_id, institution):
    attempt(lambda: _register(event_id, student_id, institution))


@when(parsers.cfparse('student "{student_id}" of "{institution}" unregisters from the event'))
def unregister(attempt, event_id, student_id, institution):
    command = UnregisterFromEvent(**_caller(student_id, institution), event_id=event_id)
    attempt(lambda: current_domain.process(command, asynchronous=False))


@when(parsers.cfparse('student "{student_id}" of "{institution}" rates the event {rating:d}'))
def rate(attempt, event_id, student_id, institution, rating):
    attempt(lambda: _rate(event_id, student_id, institution, rating))


@then(parsers.cfparse("the event's average rating is {rating:f}"))
def average_rating(event_id, rating):
    assert current_domain.repository_for(Event).get(event_id).average_rating == rating
