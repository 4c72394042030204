"""FastAPI endpoints for the Campus domain.

The caller's identity travels in the ``X-User-Id``, ``X-User-Role`` and
``X-User-Institution`` headers and is handed to every command explicitly.
"""

from fastapi import APIRouter, Depends, Header
from protean.utils.globals import current_domain

from campus.api.schemas import (
    CreateEventRequest,
    CreateUserRequest,
    EventIdResponse,
    EventResponse,
    EventStatsResponse,
    FanOutResponse,
    FeedbackRequest,
    InstitutionStatsResponse,
    NotificationListResponse,
    PurgeResponse,
    RegisterRequest,
    SendRemindersRequest,
    StatusResponse,
    UpdateEventRequest,
    UpdateEventResponse,
    UpdateUserRequest,
    UpdateUserResponse,
    UserIdResponse,
    UserListResponse,
    UserResponse,
)
from campus.event.event import Event
from campus.event.feedback import SubmitFeedback
from campus.event.lifecycle import CreateEvent, DeleteEvent, UpdateEvent
from campus.event.queries import get_event, list_events
from campus.event.registration import RegisterForEvent, UnregisterFromEvent
from campus.event.stats import event_stats, institution_stats
from campus.notification.management import DeleteNotification, MarkNotificationRead, PurgeExpiredNotifications
from campus.notification.queries import list_notifications, unread_count
from campus.notification.reminders import SendEventReminders
from campus.shared.caller import Caller
from campus.user.administration import CreateUser, DeleteUser, UpdateUser
from campus.user.queries import get_user, list_users
from campus.user.user import User, UserRole

event_router = APIRouter(prefix="/events", tags=["events"])
user_router = APIRouter(prefix="/users", tags=["users"])
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])
reminder_router = APIRouter(prefix="/reminders", tags=["reminders"])


def caller_identity(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
    x_user_institution: str | None = Header(None),
) -> Caller:
    return Caller(user_id=x_user_id, role=x_user_role, institution=x_user_institution)


def _event_response(event: Event) -> EventResponse:
    registrations = sorted(event.registrations, key=lambda r: r.registered_at or event.created_at)
    return EventResponse(
        id=str(event.id),
        title=event.title,
        description=event.description,
        date=event.date,
        location=event.location,
        creator_id=str(event.creator_id),
        creator_name=event.creator_name,
        institution=event.institution,
        target_audience=event.target_audience.to_dict(),
        registrations=[
            {
                "student_id": str(r.student_id),
                "student_name": r.student_name,
                "student_email": r.student_email,
                "registered_at": r.registered_at,
            }
            for r in registrations
        ],
        feedback_count=len(event.feedback),
        average_rating=event.average_rating,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        username=user.username,
        role=user.role,
        institution=user.institution,
        department=user.department,
        class_name=user.class_name,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


# --- Event endpoints ---


@event_router.post("", status_code=201, response_model=EventIdResponse)
async def create_event(body: CreateEventRequest, caller: Caller = Depends(caller_identity)) -> EventIdResponse:
    command = CreateEvent(
        **caller.command_fields(),
        creator_name=body.creator_name,
        title=body.title,
        description=body.description,
        date=body.date,
        location=body.location,
        audience_type=body.audience_type,
        audience_value=body.audience_value,
    )
    result = current_domain.process(command, asynchronous=False)
    return EventIdResponse(event_id=result)


@event_router.get("", response_model=list[EventResponse])
async def get_events(
    creator_id: str | None = None,
    upcoming: bool = False,
    audience_type: str | None = None,
    audience_value: str | None = None,
    caller: Caller = Depends(caller_identity),
) -> list[EventResponse]:
    caller.require_authenticated()
    events = list_events(
        caller.institution,
        creator_id=creator_id,
        upcoming=upcoming,
        audience_type=audience_type,
        audience_value=audience_value,
    )
    return [_event_response(event) for event in events]


@event_router.get("/stats", response_model=InstitutionStatsResponse)
async def get_institution_stats(caller: Caller = Depends(caller_identity)) -> InstitutionStatsResponse:
    caller.require_authenticated()
    caller.require_role(UserRole.ADMIN)
    return InstitutionStatsResponse(**institution_stats(caller.institution))


@event_router.get("/{event_id}", response_model=EventResponse)
async def get_event_detail(event_id: str, caller: Caller = Depends(caller_identity)) -> EventResponse:
    caller.require_authenticated()
    return _event_response(get_event(event_id, caller.institution))


@event_router.put("/{event_id}", response_model=UpdateEventResponse)
async def update_event(
    event_id: str, body: UpdateEventRequest, caller: Caller = Depends(caller_identity)
) -> UpdateEventResponse:
    command = UpdateEvent(
        **caller.command_fields(),
        event_id=event_id,
        title=body.title,
        description=body.description,
        date=body.date,
        location=body.location,
        audience_type=body.audience_type,
        audience_value=body.audience_value,
    )
    changed = current_domain.process(command, asynchronous=False)
    return UpdateEventResponse(changed=bool(changed))


@event_router.delete("/{event_id}", response_model=StatusResponse)
async def delete_event(event_id: str, caller: Caller = Depends(caller_identity)) -> StatusResponse:
    command = DeleteEvent(**caller.command_fields(), event_id=event_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@event_router.post("/{event_id}/registrations", status_code=201, response_model=StatusResponse)
async def register_for_event(
    event_id: str, body: RegisterRequest, caller: Caller = Depends(caller_identity)
) -> StatusResponse:
    command = RegisterForEvent(
        **caller.command_fields(),
        event_id=event_id,
        student_name=body.student_name,
        student_email=body.student_email,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@event_router.delete("/{event_id}/registrations", response_model=StatusResponse)
async def unregister_from_event(event_id: str, caller: Caller = Depends(caller_identity)) -> StatusResponse:
    command = UnregisterFromEvent(**caller.command_fields(), event_id=event_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@event_router.post("/{event_id}/feedback", status_code=201, response_model=StatusResponse)
async def submit_feedback(
    event_id: str, body: FeedbackRequest, caller: Caller = Depends(caller_identity)
) -> StatusResponse:
    command = SubmitFeedback(
        **caller.command_fields(),
        event_id=event_id,
        student_name=body.student_name,
        rating=body.rating,
        comment=body.comment,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@event_router.get("/{event_id}/stats", response_model=EventStatsResponse)
async def get_event_stats(event_id: str, caller: Caller = Depends(caller_identity)) -> EventStatsResponse:
    caller.require_authenticated()
    caller.require_role(UserRole.LECTURER, UserRole.ADMIN)
    return EventStatsResponse(**event_stats(event_id, caller.institution))


# --- User endpoints ---


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def create_user(body: CreateUserRequest, caller: Caller = Depends(caller_identity)) -> UserIdResponse:
    command = CreateUser(
        caller_id=caller.user_id,
        email=body.email,
        role=body.role,
        department=body.department,
        class_name=body.class_name,
        temporary_password=body.temporary_password,
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@user_router.get("", response_model=UserListResponse)
async def get_users(role: str | None = None, caller: Caller = Depends(caller_identity)) -> UserListResponse:
    caller.require_authenticated()
    caller.require_role(UserRole.ADMIN)
    users = list_users(caller.institution, role=role)
    return UserListResponse(users=[_user_response(user) for user in users])


@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user_detail(user_id: str, caller: Caller = Depends(caller_identity)) -> UserResponse:
    caller.require_authenticated()
    caller.require_role(UserRole.ADMIN)
    return _user_response(get_user(user_id, caller.institution))


@user_router.put("/{user_id}", response_model=UpdateUserResponse)
async def update_user(
    user_id: str, body: UpdateUserRequest, caller: Caller = Depends(caller_identity)
) -> UpdateUserResponse:
    command = UpdateUser(
        caller_id=caller.user_id,
        user_id=user_id,
        department=body.department,
        class_name=body.class_name,
    )
    changed = current_domain.process(command, asynchronous=False)
    return UpdateUserResponse(changed=bool(changed))


@user_router.delete("/{user_id}", response_model=StatusResponse)
async def delete_user(user_id: str, caller: Caller = Depends(caller_identity)) -> StatusResponse:
    command = DeleteUser(caller_id=caller.user_id, user_id=user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# --- Notification endpoints ---


@notification_router.get("", response_model=NotificationListResponse, response_model_exclude_none=True)
async def get_notifications(limit: int = 50, caller: Caller = Depends(caller_identity)) -> NotificationListResponse:
    caller.require_authenticated()
    notifications = list_notifications(caller.user_id, limit=limit)
    return NotificationListResponse(
        notifications=[notification.to_record() for notification in notifications],
        unread=unread_count(caller.user_id),
    )


@notification_router.put("/{notification_id}/read", response_model=StatusResponse)
async def mark_notification_read(notification_id: str, caller: Caller = Depends(caller_identity)) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, caller_id=caller.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@notification_router.delete("/{notification_id}", response_model=StatusResponse)
async def delete_notification(notification_id: str, caller: Caller = Depends(caller_identity)) -> StatusResponse:
    command = DeleteNotification(notification_id=notification_id, caller_id=caller.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@notification_router.post("/purge", response_model=PurgeResponse)
async def purge_notifications(caller: Caller = Depends(caller_identity)) -> PurgeResponse:
    caller.require_authenticated()
    caller.require_role(UserRole.ADMIN)
    purged = current_domain.process(PurgeExpiredNotifications(), asynchronous=False)
    return PurgeResponse(purged=purged)


# --- Reminder endpoints ---


@reminder_router.post("/run", response_model=FanOutResponse)
async def run_reminders(body: SendRemindersRequest, caller: Caller = Depends(caller_identity)) -> FanOutResponse:
    caller.require_authenticated()
    caller.require_role(UserRole.ADMIN)
    result = current_domain.process(SendEventReminders(as_of=body.as_of), asynchronous=False)
    return FanOutResponse(**result.to_dict())
