"""Explicit caller identity threaded through every campus command.

Commands carry ``caller_id``, ``caller_role`` and ``caller_institution`` as
plain fields. There is no ambient "current user"; a handler builds a
``Caller`` from its command and decides authorization from that alone.
"""

from campus.errors import PermissionDenied, Unauthenticated
from campus.user.user import UserRole


class Caller:
    """The authenticated principal on whose behalf a command runs."""

    def __init__(self, user_id: str, role: str | None = None, institution: str | None = None):
        self.user_id = user_id
        self.role = role
        self.institution = institution

    def __repr__(self) -> str:
        return f"Caller(user_id={self.user_id!r}, role={self.role!r}, institution={self.institution!r})"

    @classmethod
    def from_command(cls, command) -> "Caller":
        """Build the caller from a command, rejecting anonymous requests."""
        caller_id = getattr(command, "caller_id", None)
        if not caller_id:
            raise Unauthenticated("Must be authenticated")
        return cls(
            user_id=str(caller_id),
            role=getattr(command, "caller_role", None),
            institution=getattr(command, "caller_institution", None),
        )

    def require_authenticated(self) -> None:
        if not self.user_id:
            raise Unauthenticated("Must be authenticated")

    def command_fields(self) -> dict:
        """The caller fields every campus command accepts."""
        return {
            "caller_id": self.user_id,
            "caller_role": self.role,
            "caller_institution": self.institution,
        }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def require_role(self, *roles: UserRole) -> None:
        allowed = {role.value for role in roles}
        if self.role not in allowed:
            names = ", ".join(sorted(allowed))
            raise PermissionDenied(f"Requires one of the roles: {names}")

    def require_institution(self, institution: str) -> None:
        if not self.institution or self.institution != institution:
            raise PermissionDenied("Cannot act on records of another institution")
