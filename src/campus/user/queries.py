"""Read-side access to the user directory, scoped to one institution."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from campus.errors import InvalidArgument, NotFound, PermissionDenied
from campus.user.user import User, UserRole
from campus.utils.paging import iter_all


def get_user(user_id, institution: str) -> User:
    """Return a member of ``institution``, or raise ``NotFound``/``PermissionDenied``."""
    try:
        user = current_domain.repository_for(User).get(str(user_id))
    except ObjectNotFoundError as exc:
        raise NotFound("User not found") from exc
    if user.institution != institution:
        raise PermissionDenied("User belongs to another institution")
    return user


def list_users(institution: str, role=None) -> list[User]:
    """List an institution's users ordered by email, optionally narrowed to one role."""
    criteria = {"institution": institution}
    if role:
        if role not in {r.value for r in UserRole}:
            raise InvalidArgument(f"Unknown role: {role}")
        criteria["role"] = role

    queryset = current_domain.repository_for(User)._dao.query.filter(**criteria).order_by("email")
    return list(iter_all(queryset))
