"""Event and institution statistics for lecturer and admin dashboards."""

from protean.utils.globals import current_domain

from campus.event.queries import get_event, list_events
from campus.user.user import User, UserRole
from campus.utils.paging import iter_all


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 2)


def event_stats(event_id, institution: str) -> dict:
    """Registration and feedback figures for a single event."""
    event = get_event(event_id, institution)
    total_registrations = len(event.registrations)
    total_feedback = len(event.feedback)

    return {
        "event_id": str(event.id),
        "title": event.title,
        "total_registrations": total_registrations,
        "total_feedback": total_feedback,
        "average_rating": event.average_rating,
        "feedback_submission_rate": _percentage(total_feedback, total_registrations),
    }


def institution_stats(institution: str) -> dict:
    """Institution-wide totals across every live event and user."""
    events = list_events(institution)
    users = list(
        iter_all(current_domain.repository_for(User)._dao.query.filter(institution=institution).order_by("email"))
    )

    ratings = [f.rating for e in events for f in e.feedback]
    role_counts = {role.value: 0 for role in UserRole}
    for user in users:
        role_counts[user.role] = role_counts.get(user.role, 0) + 1

    return {
        "total_events": len(events),
        "total_users": len(users),
        "total_students": role_counts[UserRole.STUDENT.value],
        "total_lecturers": role_counts[UserRole.LECTURER.value],
        "total_admins": role_counts[UserRole.ADMIN.value],
        "total_registrations": sum(len(e.registrations) for e in events),
        "total_feedback": len(ratings),
        "average_rating": round(sum(ratings) / len(ratings), 2) if ratings else 0.0,
    }
