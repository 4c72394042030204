"""Event registration — RegisterForEvent / UnregisterFromEvent commands and handler.

Students register themselves: the registration is always recorded under the
caller's own id. A second registration by the same student is rejected.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from campus.domain import campus
from campus.event.event import Event
from campus.event.queries import load_live_event
from campus.shared.caller import Caller
from campus.user.user import UserRole

logger = structlog.get_logger(__name__)


@campus.command(part_of="Event")
class RegisterForEvent:
    """Register the calling student for an event."""

    caller_id: Identifier()
    caller_role: String(max_length=20)
    caller_institution: String(max_length=200)

    event_id: Identifier(required=True)
    student_name: String(required=True, max_length=200)
    student_email: String(required=True, max_length=254)


@campus.command(part_of="Event")
class UnregisterFromEvent:
    """Withdraw the calling student's registration."""

    caller_id: Identifier()
    caller_role: String(max_length=20)
    caller_institution: String(max_length=200)

    event_id: Identifier(required=True)


@campus.command_handler(part_of=Event)
class EventRegistrationHandler:
    @handle(RegisterForEvent)
    def register(self, command: RegisterForEvent):
        caller = Caller.from_command(command)
        caller.require_role(UserRole.STUDENT)

        repo = current_domain.repository_for(Event)
        event = load_live_event(repo, command.event_id)
        caller.require_institution(event.institution)

        event.register(
            student_id=caller.user_id,
            student_name=command.student_name,
            student_email=command.student_email,
        )
        repo.add(event)

        logger.info("Student registered", event_id=str(event.id), student_id=caller.user_id)

    @handle(UnregisterFromEvent)
    def unregister(self, command: UnregisterFromEvent):
        caller = Caller.from_command(command)
        caller.require_role(UserRole.STUDENT)

        repo = current_domain.repository_for(Event)
        event = load_live_event(repo, command.event_id)
        caller.require_institution(event.institution)

        event.unregister(caller.user_id)
        repo.add(event)

        logger.info("Student unregistered", event_id=str(event.id), student_id=caller.user_id)
