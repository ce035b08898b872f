"""Random placement of new balls and preview markers.

All randomness comes from the ``random.Random`` handed in, so a seeded
generator reproduces a game exactly.
"""
from __future__ import annotations

import random
from typing import AbstractSet, List, Sequence, Tuple

from lines.components.board import BALL_COLORS, Ball, BallColor, Board, Coordinate
from lines.systems.board_ops import clone_board, empty_cells, get_cell


def random_colors(count: int, rng: random.Random) -> List[BallColor]:
    """``count`` independent uniform draws; colors may repeat."""
    return [rng.choice(BALL_COLORS) for _ in range(count)]


def choose_empty_cells(
    board: Board,
    count: int,
    rng: random.Random,
    exclude: AbstractSet[Coordinate] = frozenset(),
) -> List[Coordinate]:
    """Up to ``count`` distinct empty cells outside ``exclude``, chosen uniformly."""
    if count <= 0:
        return []
    candidates = [pos for pos in empty_cells(board) if pos not in exclude]
    rng.shuffle(candidates)
    return candidates[:count]


def place_balls(
    board: Board,
    coordinates: Sequence[Coordinate],
    colors: Sequence[BallColor],
    *,
    incoming: bool = False,
) -> Board:
    """Pair coordinates with colors by index and write them as balls or previews."""
    if len(coordinates) > len(colors):
        raise ValueError(f"{len(coordinates)} cells but only {len(colors)} colors")
    new_board = clone_board(board)
    for (x, y), color in zip(coordinates, colors):
        cell = get_cell(new_board, x, y)
        if incoming:
            cell.incoming_ball = Ball(color)
        else:
            cell.ball = Ball(color)
    return new_board


def place_random_balls(
    board: Board,
    colors: Sequence[BallColor],
    rng: random.Random,
    *,
    incoming: bool = False,
    exclude: AbstractSet[Coordinate] = frozenset(),
) -> Tuple[Board, List[Coordinate]]:
    """Place as many of ``colors`` as fit on random empty cells."""
    positions = choose_empty_cells(board, len(colors), rng, exclude)
    return place_balls(board, positions, colors[: len(positions)], incoming=incoming), positions


def place_previews(
    board: Board,
    colors: Sequence[BallColor],
    rng: random.Random,
    exclude: AbstractSet[Coordinate] = frozenset(),
) -> Tuple[Board, List[Coordinate]]:
    return place_random_balls(board, colors, rng, incoming=True, exclude=exclude)


def convert_incoming(board: Board) -> Tuple[Board, List[Coordinate]]:
    """Turn every preview on an empty cell into a real ball; drop the rest."""
    new_board = clone_board(board)
    converted: List[Coordinate] = []
    for row in new_board:
        for cell in row:
            if cell.incoming_ball is None:
                continue
            if cell.ball is None:
                cell.ball = cell.incoming_ball
                converted.append((cell.x, cell.y))
            cell.incoming_ball = None
    return new_board, converted
