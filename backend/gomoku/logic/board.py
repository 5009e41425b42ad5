"""
Board model and five-in-a-row win detection.

The board is a fixed 15x15 grid indexed as board[y][x]. Cells hold Stone
values, which serialize to the integers the client renders (0 empty,
1 black, 2 white).
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import TypeAlias

BOARD_SIZE = 15
WIN_LENGTH = 5

# (dx, dy) for horizontal, vertical, down-right and up-right axes
_AXES = ((1, 0), (0, 1), (1, 1), (1, -1))


class Stone(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = 2

    @property
    def opponent(self) -> Stone:
        if self is Stone.BLACK:
            return Stone.WHITE
        if self is Stone.WHITE:
            return Stone.BLACK
        raise ValueError("empty cell has no opponent")


class PlayerColor(StrEnum):
    """Seat colour as shown to players. Black always moves first."""

    BLACK = "B"
    WHITE = "W"

    @property
    def stone(self) -> Stone:
        return Stone.BLACK if self is PlayerColor.BLACK else Stone.WHITE


Board: TypeAlias = list[list[Stone]]


def empty_board() -> Board:
    return [[Stone.EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def _count_direction(board: Board, x: int, y: int, dx: int, dy: int, stone: Stone) -> int:
    """Count consecutive `stone` cells starting one step from (x, y), without wraparound."""
    count = 0
    nx, ny = x + dx, y + dy
    while in_bounds(nx, ny) and board[ny][nx] == stone:
        count += 1
        nx += dx
        ny += dy
    return count


def check_win(board: Board, x: int, y: int) -> bool:
    """
    Return True if the stone at (x, y) completes a run of WIN_LENGTH or more.

    Each axis is scanned outward in both directions independently, stopping at
    the first cell that is off the board or holds a different value.
    """
    stone = board[y][x]
    if stone == Stone.EMPTY:
        return False
    for dx, dy in _AXES:
        run = 1 + _count_direction(board, x, y, dx, dy, stone) + _count_direction(board, x, y, -dx, -dy, stone)
        if run >= WIN_LENGTH:
            return True
    return False
