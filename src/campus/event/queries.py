"""Read-side access to events.

Deleted events are tombstones: every read path here treats them as missing.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from campus.errors import NotFound, PermissionDenied
from campus.event.event import Event, EventStatus
from campus.utils.paging import iter_all
from campus.utils.time import as_utc, utcnow


def load_live_event(repo, event_id) -> Event:
    """Fetch an event that has not been deleted, or raise ``NotFound``."""
    try:
        event = repo.get(str(event_id))
    except ObjectNotFoundError as exc:
        raise NotFound("Event not found") from exc
    if event.is_deleted:
        raise NotFound("Event not found")
    return event


def get_event(event_id, institution: str) -> Event:
    """Return an event visible to members of ``institution``."""
    event = load_live_event(current_domain.repository_for(Event), event_id)
    if event.institution != institution:
        raise PermissionDenied("Event belongs to another institution")
    return event


def list_events(
    institution: str,
    creator_id=None,
    upcoming: bool = False,
    audience_type=None,
    audience_value=None,
    now=None,
) -> list[Event]:
    """List an institution's events, most distant date first."""
    criteria = {"institution": institution, "status": EventStatus.SCHEDULED.value}
    if creator_id:
        criteria["creator_id"] = str(creator_id)

    queryset = current_domain.repository_for(Event)._dao.query.filter(**criteria).order_by("-date")
    events = list(iter_all(queryset))

    if upcoming:
        now = as_utc(now) if now else utcnow()
        events = [e for e in events if as_utc(e.date) > now]
    if audience_type:
        events = [e for e in events if e.target_audience.audience_type == audience_type]
    if audience_value:
        events = [e for e in events if e.target_audience.value == audience_value]

    return events
