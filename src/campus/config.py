"""Runtime settings for the notification engine.

Values come from environment variables so that deployments can tune the
fan-out without code changes. Settings are re-read on every call to
``get_settings()``; nothing is cached at import time.
"""

import os

DEFAULT_SIGNIFICANT_FIELDS = ("title", "date", "location")


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _fields_from_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Settings:
    """Notification engine settings.

    Attributes:
        environment: Value of ``PROTEAN_ENV`` (``development`` by default).
        batch_limit: Maximum notifications committed per atomic batch.
        reminder_window_hours: Look-ahead of the reminder sweep.
        significant_fields: Event fields whose change notifies registrants.
        retention_days: Age after which read notifications are purged.
        notification_store: ``repository`` or ``fake``.
        credential_adapter: Credential backend name (only ``fake`` ships).
    """

    def __init__(
        self,
        environment: str = "development",
        batch_limit: int = 500,
        reminder_window_hours: int = 24,
        significant_fields: tuple[str, ...] = DEFAULT_SIGNIFICANT_FIELDS,
        retention_days: int = 90,
        notification_store: str = "repository",
        credential_adapter: str = "fake",
    ):
        self.environment = environment
        self.batch_limit = batch_limit
        self.reminder_window_hours = reminder_window_hours
        self.significant_fields = significant_fields
        self.retention_days = retention_days
        self.notification_store = notification_store
        self.credential_adapter = credential_adapter

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=os.getenv("PROTEAN_ENV", "development").lower(),
            batch_limit=_int_from_env("NOTIFICATION_BATCH_LIMIT", 500),
            reminder_window_hours=_int_from_env("REMINDER_WINDOW_HOURS", 24),
            significant_fields=_fields_from_env("SIGNIFICANT_EVENT_FIELDS", DEFAULT_SIGNIFICANT_FIELDS),
            retention_days=_int_from_env("NOTIFICATION_RETENTION_DAYS", 90),
            notification_store=os.getenv("NOTIFICATION_STORE", "repository").lower(),
            credential_adapter=os.getenv("CREDENTIAL_ADAPTER", "fake").lower(),
        )


def get_settings() -> Settings:
    return Settings.from_env()
