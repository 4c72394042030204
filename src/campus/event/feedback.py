"""SubmitFeedback — a student rates an event, once."""

import structlog
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from campus.domain import campus
from campus.event.event import Event
from campus.event.queries import load_live_event
from campus.shared.caller import Caller
from campus.user.user import UserRole

logger = structlog.get_logger(__name__)


@campus.command(part_of="Event")
class SubmitFeedback:
    caller_id: Identifier()
    caller_role: String(max_length=20)
    caller_institution: String(max_length=200)

    event_id: Identifier(required=True)
    student_name: String(required=True, max_length=200)
    rating: Integer(required=True)
    comment: Text()


@campus.command_handler(part_of=Event)
class SubmitFeedbackHandler:
    @handle(SubmitFeedback)
    def submit_feedback(self, command: SubmitFeedback):
        caller = Caller.from_command(command)
        caller.require_role(UserRole.STUDENT)

        repo = current_domain.repository_for(Event)
        event = load_live_event(repo, command.event_id)
        caller.require_institution(event.institution)

        event.submit_feedback(
            student_id=caller.user_id,
            student_name=command.student_name,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(event)

        logger.info(
            "Feedback submitted",
            event_id=str(event.id),
            student_id=caller.user_id,
            rating=command.rating,
        )
