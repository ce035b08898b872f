from __future__ import annotations

from typing import Iterable, Sequence

from lines.components.board import BALL_COLORS, Ball, BallColor, Board
from lines.constants import BOARD_SIZE
from lines.events.bus import EventBus
from lines.systems.board_ops import create_empty_board

COLOR_CODES = {
    'R': BallColor.RED,
    'G': BallColor.GREEN,
    'B': BallColor.BLUE,
    'Y': BallColor.YELLOW,
    'P': BallColor.PURPLE,
    'C': BallColor.CYAN,
    'K': BallColor.BLACK,
}


def board_from_rows(rows: Sequence[str]) -> Board:
    """Build a board from text rows, top row first.

    Upper-case letters are balls, lower-case letters are previews on an empty
    cell and '.' is empty. Missing rows/columns are empty.
    """
    board = create_empty_board()
    for y, row in enumerate(rows):
        for x, code in enumerate(row):
            if code == '.':
                continue
            color = COLOR_CODES[code.upper()]
            if code.isupper():
                board[y][x].ball = Ball(color)
            else:
                board[y][x].incoming_ball = Ball(color)
    return board


def pattern_color(x: int, y: int) -> BallColor:
    # Neighbours differ along every axis, so the pattern holds no run of two.
    return BALL_COLORS[(x + 2 * y) % len(BALL_COLORS)]


def patterned_board(empty: Iterable[tuple[int, int]] = ()) -> Board:
    """A full board without lines, except for the given empty cells."""
    holes = set(empty)
    board = create_empty_board()
    for y in range(BOARD_SIZE):
        for x in range(BOARD_SIZE):
            if (x, y) not in holes:
                board[y][x].ball = Ball(pattern_color(x, y))
    return board


def capture(bus: EventBus, name: str) -> list[dict]:
    """Subscribe to ``name`` and collect each payload."""
    received: list[dict] = []
    bus.subscribe(name, lambda sender, **payload: received.append(payload))
    return received
