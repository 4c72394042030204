from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from protean.integrations.pytest import DomainFixture

INSTITUTION = "uni-north"
OTHER_INSTITUTION = "uni-south"


@pytest.fixture(scope="session")
def campus_bed():
    from campus.domain import campus

    bed = DomainFixture(campus)
    bed.setup()
    yield bed
    bed.teardown()


def _reset_registries():
    from campus.credentials import reset_credentials
    from campus.notification.store import reset_notification_store

    reset_credentials()
    reset_notification_store()


@pytest.fixture(autouse=True)
def _ctx(campus_bed):
    _reset_registries()
    with campus_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
    _reset_registries()


@pytest.fixture
def make_user():
    """Add a user straight to the directory, bypassing the admin command."""
    from protean import current_domain

    from campus.user.user import User

    def _make(role="student", institution=INSTITUTION, department=None, class_name=None, user_id=None):
        user_id = user_id or uuid4().hex
        user = User.create(
            user_id=user_id,
            email=f"{user_id}@{institution}.example",
            role=role,
            institution=institution,
            department=department,
            class_name=class_name,
        )
        current_domain.repository_for(User).add(user)
        return user

    return _make


@pytest.fixture
def make_event():
    """Persist an event (and its registrations) without triggering the fan-out."""
    from protean import current_domain

    from campus.event.event import Event, TargetAudience

    def _make(
        creator_id="lecturer-1",
        institution=INSTITUTION,
        title="Careers Fair",
        date=None,
        location="Main Hall",
        audience=None,
        registrants=(),
    ):
        event = Event.schedule(
            title=title,
            date=date or datetime.now(UTC) + timedelta(days=7),
            location=location,
            creator_id=creator_id,
            institution=institution,
            target_audience=audience or TargetAudience.general(),
            description="Annual fair",
            creator_name="Dr. Grace Hopper",
        )
        for student_id in registrants:
            event.register(student_id, f"Student {student_id}", f"{student_id}@{institution}.example")
        event._events.clear()
        current_domain.repository_for(Event).add(event)
        return event

    return _make


@pytest.fixture
def notifications_for():
    """Return a user's notification records from the repository."""
    from protean import current_domain

    from campus.notification.notification import Notification

    def _query(user_id=None, **filters):
        if user_id is not None:
            filters["user_id"] = str(user_id)
        query = current_domain.repository_for(Notification)._dao.query
        if filters:
            query = query.filter(**filters)
        return query.limit(5000).all().items

    return _query
