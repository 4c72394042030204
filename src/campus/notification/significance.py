"""Change significance — decides whether an event update is worth a notification.

Only a configurable set of fields counts. Edits to anything else (the
description, the audience, the registration list) never notify registrants.
"""

from campus.config import DEFAULT_SIGNIFICANT_FIELDS, get_settings


def _field(snapshot, name):
    if isinstance(snapshot, dict):
        return snapshot.get(name)
    return getattr(snapshot, name, None)


class SignificancePolicy:
    """The set of event fields whose change is significant."""

    def __init__(self, fields=DEFAULT_SIGNIFICANT_FIELDS):
        if not fields:
            raise ValueError("A significance policy needs at least one field")
        self.fields = tuple(fields)

    @classmethod
    def from_settings(cls, settings=None) -> "SignificancePolicy":
        settings = settings or get_settings()
        return cls(settings.significant_fields)

    def changed_fields(self, before, after) -> list[str]:
        return [name for name in self.fields if _field(before, name) != _field(after, name)]

    def is_significant(self, before, after) -> bool:
        return bool(self.changed_fields(before, after))


def is_significant(before, after, policy: SignificancePolicy | None = None) -> bool:
    """True if any field in the policy differs between the two snapshots.

    Snapshots are the dicts carried by ``EventUpdated``; aggregates work too.
    """
    policy = policy or SignificancePolicy.from_settings()
    return policy.is_significant(before, after)
