"""Room state for a single gomoku session and its client-visible projection."""

import time
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from gomoku.logic.board import Board, PlayerColor, Stone, copy_board, empty_board

MAX_PLAYERS = 2


class PublicPlayer(BaseModel):
    """Seat info broadcast to clients."""

    model_config = ConfigDict(frozen=True)

    color: PlayerColor | None
    score: int


class PublicRoom(BaseModel):
    """
    Client-visible projection of a Room.

    Carries no connection ids, restart votes or timestamps. `id` mirrors
    `code` because clients key rooms by it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    code: str
    players: dict[str, PublicPlayer]
    board: list[list[Stone]]
    turn: Stone
    started: bool
    winner: Stone


@dataclass
class RoomPlayer:
    color: PlayerColor | None = None
    score: int = 0


@dataclass
class Room:
    """
    A live game session addressed by its invite code.

    Lifecycle:
    - Created empty by the registry (turn=BLACK, not started, no winner)
    - Becomes started once two identities hold two connections and colours are dealt
    - Finished while `winner` is set; a restart vote returns it to play
    - Deleted by the gateway when its last connection leaves
    """

    code: str
    created_at: float = field(default_factory=time.time)
    players: dict[str, RoomPlayer] = field(default_factory=dict)  # client_id -> RoomPlayer
    connections: set[str] = field(default_factory=set)  # connection ids
    board: Board = field(default_factory=empty_board)
    turn: Stone = Stone.BLACK
    started: bool = False
    winner: Stone = Stone.EMPTY
    restart_votes: set[str] = field(default_factory=set)  # client ids

    @property
    def connection_count(self) -> int:
        return len(self.connections)

    @property
    def is_empty(self) -> bool:
        return not self.connections

    @property
    def is_full(self) -> bool:
        return self.connection_count >= MAX_PLAYERS

    @property
    def is_finished(self) -> bool:
        return self.winner != Stone.EMPTY

    @property
    def is_seated(self) -> bool:
        """Both seats are held by distinct identities that were dealt colours."""
        return (
            self.connection_count >= MAX_PLAYERS
            and len(self.players) == MAX_PLAYERS
            and all(p.color is not None for p in self.players.values())
        )

    def public_players(self) -> dict[str, PublicPlayer]:
        return {cid: PublicPlayer(color=p.color, score=p.score) for cid, p in self.players.items()}

    def to_public(self) -> PublicRoom:
        """Snapshot the room for broadcasting. The board is copied so later moves don't leak in."""
        return PublicRoom(
            id=self.code,
            code=self.code,
            players=self.public_players(),
            board=copy_board(self.board),
            turn=self.turn,
            started=self.started,
            winner=self.winner,
        )


def serialize_public(room: Room) -> dict:
    """Return the JSON-ready public projection of `room`."""
    return room.to_public().model_dump(mode="json")
