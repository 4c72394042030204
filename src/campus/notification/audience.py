"""Audience resolution — which students an event is aimed at."""

from protean.utils.globals import current_domain

from campus.event.event import AudienceType, TargetAudience
from campus.user.user import User, UserRole
from campus.utils.paging import iter_all


def resolve_audience(institution: str, audience: TargetAudience) -> set[str]:
    """Return the ids of every student in ``institution`` matching ``audience``.

    Only students are ever returned. ``General`` matches the whole
    institution; ``Department`` and ``Class`` narrow it by exact match.
    """
    criteria = {"institution": institution, "role": UserRole.STUDENT.value}

    audience_type = AudienceType(audience.audience_type)
    if audience_type is AudienceType.DEPARTMENT:
        criteria["department"] = audience.value
    elif audience_type is AudienceType.CLASS:
        criteria["class_name"] = audience.value

    queryset = current_domain.repository_for(User)._dao.query.filter(**criteria).order_by("id")
    return {str(user.id) for user in iter_all(queryset)}
