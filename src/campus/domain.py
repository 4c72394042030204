"""Campus bounded context — events, their audiences, and the notification fan-out.

Owns the User directory, the Event aggregate with its registration and
feedback state, and the Notification records produced whenever an event is
created, changed, cancelled, or about to happen.
"""

from protean.domain import Domain

campus = Domain(name="campus")
