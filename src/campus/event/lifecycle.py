"""Event lifecycle — CreateEvent / UpdateEvent / DeleteEvent commands and handler.

Lecturers and admins create events for their own institution. Only the
creator, or an admin of the same institution, may change or delete one.
"""

import structlog
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from campus.domain import campus
from campus.errors import PermissionDenied
from campus.event.event import AudienceType, Event, TargetAudience
from campus.event.queries import load_live_event
from campus.shared.caller import Caller
from campus.user.user import UserRole

logger = structlog.get_logger(__name__)


@campus.command(part_of="Event")
class CreateEvent:
    """Schedule a new event in the caller's institution."""

    caller_id: Identifier()
    caller_role: String(max_length=20)
    caller_institution: String(max_length=200)
    creator_name: String(max_length=200)

    title: String(required=True, max_length=200)
    description: Text()
    date: DateTime(required=True)
    location: String(required=True, max_length=255)
    audience_type: String(choices=AudienceType, default=AudienceType.GENERAL.value)
    audience_value: String(max_length=200)


@campus.command(part_of="Event")
class UpdateEvent:
    """Change any of an event's details. Omitted fields stay as they are."""

    caller_id: Identifier()
    caller_role: String(max_length=20)
    caller_institution: String(max_length=200)

    event_id: Identifier(required=True)
    title: String(max_length=200)
    description: Text()
    date: DateTime()
    location: String(max_length=255)
    audience_type: String(choices=AudienceType)
    audience_value: String(max_length=200)


@campus.command(part_of="Event")
class DeleteEvent:
    """Delete an event; registered students are told it was cancelled."""

    caller_id: Identifier()
    caller_role: String(max_length=20)
    caller_institution: String(max_length=200)

    event_id: Identifier(required=True)


def _authorize_owner(caller: Caller, event: Event) -> None:
    caller.require_institution(event.institution)
    if caller.user_id != str(event.creator_id) and not caller.is_admin:
        raise PermissionDenied("Only the creator or an admin can modify this event")


@campus.command_handler(part_of=Event)
class EventLifecycleHandler:
    @handle(CreateEvent)
    def create_event(self, command: CreateEvent):
        caller = Caller.from_command(command)
        caller.require_role(UserRole.LECTURER, UserRole.ADMIN)
        if not caller.institution:
            raise PermissionDenied("Caller does not belong to an institution")

        audience = TargetAudience.from_dict({"type": command.audience_type, "value": command.audience_value})
        event = Event.schedule(
            title=command.title,
            description=command.description,
            date=command.date,
            location=command.location,
            creator_id=caller.user_id,
            creator_name=command.creator_name,
            institution=caller.institution,
            target_audience=audience,
        )
        current_domain.repository_for(Event).add(event)

        logger.info(
            "Event created",
            event_id=str(event.id),
            institution=caller.institution,
            audience_type=audience.audience_type,
        )
        return str(event.id)

    @handle(UpdateEvent)
    def update_event(self, command: UpdateEvent):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(Event)
        event = load_live_event(repo, command.event_id)
        _authorize_owner(caller, event)

        updates = {}
        for field in ("title", "description", "date", "location"):
            value = getattr(command, field, None)
            if value is not None:
                updates[field] = value
        if command.audience_type is not None:
            updates["target_audience"] = TargetAudience.from_dict(
                {"type": command.audience_type, "value": command.audience_value}
            )

        changed = event.update_details(**updates)
        if changed:
            repo.add(event)

        logger.info("Event update processed", event_id=str(event.id), changed=changed)
        return changed

    @handle(DeleteEvent)
    def delete_event(self, command: DeleteEvent):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(Event)
        event = load_live_event(repo, command.event_id)
        _authorize_owner(caller, event)

        event.delete(deleted_by=caller.user_id)
        repo.add(event)

        logger.info("Event deleted", event_id=str(event.id), deleted_by=caller.user_id)
