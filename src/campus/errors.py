"""Error taxonomy surfaced synchronously by campus commands.

Each error carries a stable ``code`` string that the HTTP layer maps to a
status code. Field-level and invariant failures keep using Protean's
``ValidationError``.
"""


class CampusError(Exception):
    """Base class for errors returned to the caller of a campus operation."""

    code = "internal"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.code


class Unauthenticated(CampusError):
    """No caller identity was supplied to an operation that requires one."""

    code = "unauthenticated"


class PermissionDenied(CampusError):
    """The caller lacks the required role or crosses an institution boundary."""

    code = "permission-denied"


class NotFound(CampusError):
    """The referenced event, user, registration or notification does not exist."""

    code = "not-found"


class AlreadyExists(CampusError):
    """Duplicate registration or duplicate feedback for the same student."""

    code = "already-exists"


class InvalidArgument(CampusError):
    """Malformed input, such as an admin deleting their own account."""

    code = "invalid-argument"


class Internal(CampusError):
    """The store or a downstream collaborator failed."""

    code = "internal"
