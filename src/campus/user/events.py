"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from campus.domain import campus


@campus.event(part_of="User")
class UserCreated:
    """An admin added a user to their institution."""

    __version__ = "v1"

    user_id: Identifier(required=True)
    email: String(required=True)
    role: String(required=True)
    institution: String(required=True)
    department: String()
    class_name: String()
    created_at: DateTime(required=True)


@campus.event(part_of="User")
class UserUpdated:
    """An admin changed a user's department or class."""

    __version__ = "v1"

    user_id: Identifier(required=True)
    department: String()
    class_name: String()
    updated_at: DateTime(required=True)
