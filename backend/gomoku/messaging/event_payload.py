"""Wire envelopes for domain events.

Room-state events (room_update, restart) carry the public room itself as
their payload; the rest carry the event fields minus the type tag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gomoku.logic.events import RestartEvent, RoomUpdateEvent

if TYPE_CHECKING:
    from gomoku.logic.events import RoomEvent


def event_message(event: RoomEvent) -> dict[str, Any]:
    """Return the `{"type", "payload"}` dict for a domain event."""
    if isinstance(event, (RoomUpdateEvent, RestartEvent)):
        payload = event.room.model_dump(mode="json")
    else:
        payload = event.model_dump(mode="json", exclude={"type"})
    return {"type": event.type.value, "payload": payload}
