"""The settle transaction run once a move's animation has finished.

``settle_move`` is a pure function of the pre-move board, the colors waiting in
the preview queue and a random source. The turn engine applies its result to
GameState in one step.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Sequence

from lines.components.board import BallColor, Board, Coordinate
from lines.constants import BALLS_PER_TURN, INITIAL_BALLS
from lines.systems.board_ops import (
    clear_incoming,
    count_empty_cells,
    create_empty_board,
    get_cell,
    incoming_positions,
    is_board_full,
    move_ball,
    remove_balls,
)
from lines.systems.match import find_lines, score_lines, unique_positions
from lines.systems.spawn import convert_incoming, place_previews, place_random_balls, random_colors


@dataclass(slots=True)
class SettleResult:
    board: Board
    next_balls: List[BallColor]
    score_delta: int = 0
    lines: List[List[Coordinate]] = field(default_factory=list)
    cleared: List[Coordinate] = field(default_factory=list)
    spawned: List[Coordinate] = field(default_factory=list)
    previews: List[Coordinate] = field(default_factory=list)
    preview_recalculated: bool = False
    previous_previews: List[Coordinate] = field(default_factory=list)
    recalculated: List[Coordinate] = field(default_factory=list)
    game_over: bool = False


def _recalculate_previews(
    board: Board,
    next_balls: Sequence[BallColor],
    previous: List[Coordinate],
    rng: random.Random,
) -> tuple[Board, List[Coordinate]]:
    cleared = clear_incoming(board)
    avoid = set(previous)
    free = [
        (cell.x, cell.y)
        for row in cleared
        for cell in row
        if cell.ball is None and (cell.x, cell.y) not in avoid
    ]
    # Stay off the old preview cells unless that leaves too little room.
    exclude = avoid if len(free) >= len(next_balls) else frozenset()
    return place_previews(cleared, next_balls, rng, exclude=exclude)


def settle_move(
    board: Board,
    source: Coordinate,
    target: Coordinate,
    next_balls: Sequence[BallColor],
    rng: random.Random,
    *,
    balls_per_turn: int = BALLS_PER_TURN,
) -> SettleResult:
    moving = get_cell(board, *source).ball
    if moving is None:
        raise ValueError(f"no ball to move at {source}")
    landed_on_preview = get_cell(board, *target).incoming_ball is not None
    previous_previews = incoming_positions(board)

    # 1. Move; the destination loses any preview it held.
    after = move_ball(board, source, target)
    result = SettleResult(board=after, next_balls=list(next_balls))

    # 2. Landing on a preview invalidates the whole preview placement.
    if landed_on_preview:
        if is_board_full(after):
            result.board = clear_incoming(after)
            result.game_over = True
            return result
        after, positions = _recalculate_previews(after, next_balls, previous_previews, rng)
        result.board = after
        result.preview_recalculated = True
        result.previous_previews = previous_previews
        result.recalculated = positions
        result.previews = positions

    # 3. Lines through the landing cell clear and score; nothing spawns.
    tx, ty = target
    lines = find_lines(after, tx, ty, moving.color)
    if lines:
        cleared = unique_positions(lines)
        result.board = remove_balls(after, cleared)
        result.lines = lines
        result.cleared = cleared
        result.score_delta = score_lines(lines)
        result.next_balls = random_colors(balls_per_turn, rng)
        return result

    # 4. No line: this turn's previews arrive and the next ones are scheduled.
    if count_empty_cells(after) == 0:
        result.board = clear_incoming(after)
        result.game_over = True
        return result
    after, spawned = convert_incoming(after)
    colors = random_colors(balls_per_turn, rng)
    after, previews = place_previews(after, colors, rng)
    result.board = after
    result.spawned = spawned
    result.previews = previews
    result.next_balls = colors
    result.game_over = is_board_full(after)
    return result


def new_game_board(
    rng: random.Random,
    next_balls: Sequence[BallColor],
    *,
    initial_balls: int = INITIAL_BALLS,
) -> Board:
    """Empty board with ``initial_balls`` random balls and ``next_balls`` previewed."""
    board = create_empty_board()
    board, _ = place_random_balls(board, random_colors(initial_balls, rng), rng)
    board, _ = place_previews(board, next_balls, rng)
    return board
