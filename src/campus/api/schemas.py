"""Pydantic request/response schemas for the Campus API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Event Request Schemas ---


class CreateEventRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Careers Fair",
                    "description": "Meet employers from across the region.",
                    "date": "2026-11-05T10:00:00Z",
                    "location": "Main Hall",
                    "audience_type": "department",
                    "audience_value": "Computer Science",
                    "creator_name": "Dr. Ada Lovelace",
                }
            ]
        }
    }

    title: str = Field(..., max_length=200)
    description: str | None = None
    date: datetime
    location: str = Field(..., max_length=255)
    audience_type: str = Field("general", max_length=20)
    audience_value: str | None = Field(None, max_length=200)
    creator_name: str | None = Field(None, max_length=200)


class UpdateEventRequest(BaseModel):
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    date: datetime | None = None
    location: str | None = Field(None, max_length=255)
    audience_type: str | None = Field(None, max_length=20)
    audience_value: str | None = Field(None, max_length=200)


class RegisterRequest(BaseModel):
    student_name: str = Field(..., max_length=200)
    student_email: str = Field(..., max_length=254)


class FeedbackRequest(BaseModel):
    student_name: str = Field(..., max_length=200)
    rating: int
    comment: str | None = None


# --- User Request Schemas ---


class CreateUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane.doe@uni.example",
                    "role": "student",
                    "department": "Computer Science",
                    "class_name": "CS-2026",
                    "temporary_password": "change-me-123",
                }
            ]
        }
    }

    email: str = Field(..., max_length=254)
    role: str = Field(..., max_length=20)
    department: str | None = Field(None, max_length=200)
    class_name: str | None = Field(None, max_length=200)
    temporary_password: str = Field(..., min_length=6, max_length=128)


class UpdateUserRequest(BaseModel):
    department: str | None = Field(None, max_length=200)
    class_name: str | None = Field(None, max_length=200)


# --- Reminder Request Schemas ---


class SendRemindersRequest(BaseModel):
    as_of: datetime | None = None


# --- Response Schemas ---


class EventIdResponse(BaseModel):
    event_id: str


class UserIdResponse(BaseModel):
    user_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class UpdateEventResponse(BaseModel):
    status: str = "ok"
    changed: bool


class UpdateUserResponse(BaseModel):
    status: str = "ok"
    changed: bool


class UserResponse(BaseModel):
    id: str
    email: str
    username: str | None = None
    role: str
    institution: str
    department: str | None = None
    class_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserListResponse(BaseModel):
    users: list[UserResponse]


class AudienceResponse(BaseModel):
    type: str
    value: str | None = None


class RegistrationResponse(BaseModel):
    student_id: str
    student_name: str
    student_email: str
    registered_at: datetime | None = None


class EventResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    date: datetime
    location: str
    creator_id: str
    creator_name: str | None = None
    institution: str
    target_audience: AudienceResponse
    registrations: list[RegistrationResponse] = []
    feedback_count: int = 0
    average_rating: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EventStatsResponse(BaseModel):
    event_id: str
    title: str
    total_registrations: int
    total_feedback: int
    average_rating: float
    feedback_submission_rate: float


class InstitutionStatsResponse(BaseModel):
    total_events: int
    total_users: int
    total_students: int
    total_lecturers: int
    total_admins: int
    total_registrations: int
    total_feedback: int
    average_rating: float


class NotificationResponse(BaseModel):
    id: str
    userId: str
    type: str
    message: str
    eventId: str | None = None
    link: str | None = None
    isRead: bool
    createdAt: str | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread: int


class PurgeResponse(BaseModel):
    purged: int


class FanOutResponse(BaseModel):
    correlation_id: str
    recipients: int
    written: int
    batches: int
    ok: bool
    error: str | None = None
