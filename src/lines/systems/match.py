from __future__ import annotations

from typing import Iterable, List

from lines.components.board import BallColor, Board, Coordinate
from lines.constants import MIN_LINE_LENGTH, SCORING_TABLE
from lines.systems.board_ops import ball_at

# Horizontal, vertical, diagonal down-right, diagonal up-right.
AXES = ((1, 0), (0, 1), (1, 1), (1, -1))


def _run(board: Board, x: int, y: int, dx: int, dy: int, color: BallColor) -> List[Coordinate]:
    run: List[Coordinate] = []
    nx, ny = x + dx, y + dy
    while True:
        ball = ball_at(board, nx, ny)
        if ball is None or ball.color != color:
            return run
        run.append((nx, ny))
        nx += dx
        ny += dy


def find_lines(board: Board, x: int, y: int, color: BallColor) -> List[List[Coordinate]]:
    """Return each axis line through (x, y) of ``color`` at least MIN_LINE_LENGTH long.

    Lines are ordered from the far backward end to the far forward end. The
    landing cell is counted even if the board does not hold a ball there.
    """
    lines: List[List[Coordinate]] = []
    for dx, dy in AXES:
        backward = _run(board, x, y, -dx, -dy, color)
        forward = _run(board, x, y, dx, dy, color)
        line = list(reversed(backward)) + [(x, y)] + forward
        if len(line) >= MIN_LINE_LENGTH:
            lines.append(line)
    return lines


def unique_positions(lines: Iterable[List[Coordinate]]) -> List[Coordinate]:
    """Cells covered by any line, each once, sorted for deterministic events."""
    return sorted({pos for line in lines for pos in line})


def line_score(length: int) -> int:
    return SCORING_TABLE.get(length, length)


def score_lines(lines: Iterable[List[Coordinate]]) -> int:
    # Scored per line: a ball shared by crossing lines counts for each of them.
    return sum(line_score(len(line)) for line in lines)
