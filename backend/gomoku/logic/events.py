"""
Domain events produced by the game state machine.

Every event is a room-wide broadcast. The messaging layer turns them into
wire envelopes; this module knows nothing about transport.
"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from gomoku.logic.board import PlayerColor, Stone
from gomoku.logic.state import PublicPlayer, PublicRoom


class EventType(StrEnum):
    ROOM_UPDATE = "room_update"
    MOVE = "move"
    GAME_END = "game_end"
    RESTART = "restart"
    RESTART_VOTE = "restart_vote"


class GameEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: EventType


class RoomUpdateEvent(GameEvent):
    """Full room state after a join or departure."""

    type: Literal[EventType.ROOM_UPDATE] = EventType.ROOM_UPDATE
    room: PublicRoom


class MoveEvent(GameEvent):
    """A non-winning stone placement. Clients apply the delta to their own board."""

    type: Literal[EventType.MOVE] = EventType.MOVE
    x: int
    y: int
    color: PlayerColor
    turn: Stone


class GameEndEvent(GameEvent):
    type: Literal[EventType.GAME_END] = EventType.GAME_END
    winner: Stone
    board: list[list[Stone]]
    players: dict[str, PublicPlayer]


class RestartEvent(GameEvent):
    type: Literal[EventType.RESTART] = EventType.RESTART
    room: PublicRoom


class RestartVoteEvent(GameEvent):
    """Restart quorum progress. Only the count is shared, not who voted."""

    type: Literal[EventType.RESTART_VOTE] = EventType.RESTART_VOTE
    votes: int


RoomEvent = RoomUpdateEvent | MoveEvent | GameEndEvent | RestartEvent | RestartVoteEvent
