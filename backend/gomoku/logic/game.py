"""
Turn-based game state machine for a gomoku room.

Each operation mutates a Room synchronously and returns the events to
broadcast. An empty list means the request was ignored: stale or duplicate
client messages (a move after the game ended, a double click on a cell) are
tolerated silently instead of producing errors.

Room states: Waiting (one connection) -> Active (two connections, started)
-> Finished (winner set) -> Waiting or Active again after a restart.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from gomoku.logic.board import Stone, check_win, copy_board, empty_board, in_bounds
from gomoku.logic.events import (
    GameEndEvent,
    MoveEvent,
    RestartEvent,
    RestartVoteEvent,
    RoomUpdateEvent,
)
from gomoku.logic.rng import assign_colors
from gomoku.logic.state import MAX_PLAYERS, RoomPlayer

if TYPE_CHECKING:
    import random

    from gomoku.logic.events import RoomEvent
    from gomoku.logic.state import Room

logger = structlog.get_logger()


class JoinRejection(StrEnum):
    ROOM_NOT_FOUND = "room_not_found"
    ROOM_FULL = "room_full"


def _room_update(room: Room) -> list[RoomEvent]:
    return [RoomUpdateEvent(room=room.to_public())]


def _seat(room: Room, connection_id: str, client_id: str) -> None:
    room.connections.add(connection_id)
    if client_id not in room.players:
        room.players[client_id] = RoomPlayer()


def open_room(room: Room, connection_id: str, client_id: str) -> list[RoomEvent]:
    """Seat the creator of a freshly created room."""
    _seat(room, connection_id, client_id)
    logger.info("room opened", room=room.code, client_id=client_id)
    return _room_update(room)


def join_room(
    room: Room | None,
    connection_id: str,
    client_id: str,
    rng: random.Random,
) -> list[RoomEvent] | JoinRejection:
    """
    Attach a connection to a room, dealing colours once both seats are filled.

    Rejections leave the room untouched. Colours are (re)dealt whenever the
    room reaches exactly two connections held by two distinct identities; the
    board is cleared because any previous game was abandoned when a seat
    emptied.
    """
    if room is None:
        return JoinRejection.ROOM_NOT_FOUND
    if room.is_full:
        return JoinRejection.ROOM_FULL

    _seat(room, connection_id, client_id)
    logger.info("player joined", room=room.code, client_id=client_id, connections=room.connection_count)

    if room.connection_count == MAX_PLAYERS and len(room.players) == MAX_PLAYERS:
        for cid, color in assign_colors(list(room.players), rng).items():
            room.players[cid].color = color
        room.board = empty_board()
        room.turn = Stone.BLACK
        room.winner = Stone.EMPTY
        room.restart_votes.clear()
        room.started = True
        logger.info("game started", room=room.code)

    return _room_update(room)


def _ignore(room: Room, client_id: str, reason: str) -> list[RoomEvent]:
    logger.debug("move ignored", room=room.code, client_id=client_id, reason=reason)
    return []


def place_stone(room: Room, client_id: str, x: int, y: int) -> list[RoomEvent]:
    """Apply a move for `client_id`, or ignore it if it is not legal right now."""
    if not room.started:
        return _ignore(room, client_id, "not_started")
    if room.is_finished:
        return _ignore(room, client_id, "game_over")
    player = room.players.get(client_id)
    if player is None or player.color is None:
        return _ignore(room, client_id, "not_a_player")
    stone = player.color.stone
    if stone != room.turn:
        return _ignore(room, client_id, "not_your_turn")
    if not in_bounds(x, y):
        return _ignore(room, client_id, "out_of_bounds")
    if room.board[y][x] != Stone.EMPTY:
        return _ignore(room, client_id, "occupied")

    room.board[y][x] = stone

    if check_win(room.board, x, y):
        room.winner = stone
        player.score += 1
        logger.info("game won", room=room.code, client_id=client_id, winner=stone, score=player.score)
        return [GameEndEvent(winner=stone, board=copy_board(room.board), players=room.public_players())]

    room.turn = stone.opponent
    return [MoveEvent(x=x, y=y, color=player.color, turn=room.turn)]


def request_restart(room: Room, client_id: str) -> list[RoomEvent]:
    """
    Record a rematch vote and reset the board once the quorum is met.

    Quorum is min(2, connection_count): a lone occupant restarts alone, a full
    room needs both players.
    """
    room.restart_votes.add(client_id)
    quorum = min(MAX_PLAYERS, room.connection_count)
    if len(room.restart_votes) < quorum:
        return [RestartVoteEvent(votes=len(room.restart_votes))]

    room.board = empty_board()
    room.turn = Stone.BLACK
    room.started = room.is_seated
    room.winner = Stone.EMPTY
    room.restart_votes.clear()
    logger.info("game restarted", room=room.code, started=room.started)
    return [RestartEvent(room=room.to_public())]


def leave_room(room: Room, connection_id: str, client_id: str) -> list[RoomEvent]:
    """
    Detach a connection and drop its player entry, halting any game in progress.

    The departing player's score is discarded; a later rejoin under the same
    identity starts from zero. Their pending restart vote is dropped too.
    """
    room.connections.discard(connection_id)
    room.players.pop(client_id, None)
    room.restart_votes.discard(client_id)
    room.started = False
    room.winner = Stone.EMPTY
    logger.info("player left", room=room.code, client_id=client_id, connections=room.connection_count)
    return _room_update(room)
