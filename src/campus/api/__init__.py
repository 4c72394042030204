"""Campus API package."""

from campus.api.errors import register_exception_handlers
from campus.api.routes import event_router, notification_router, reminder_router, user_router

__all__ = [
    "event_router",
    "user_router",
    "notification_router",
    "reminder_router",
    "register_exception_handlers",
]
