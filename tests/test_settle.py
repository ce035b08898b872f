import random

import pytest

from lines.components.board import Ball, BallColor
from lines.constants import INITIAL_BALLS
from lines.systems.board_ops import count_empty_cells, incoming_positions, is_board_full
from lines.systems.settle import new_game_board, settle_move
from tests.helpers import board_from_rows, patterned_board

NEXT = [BallColor.GREEN, BallColor.BLUE, BallColor.YELLOW]


def _ball_count(board):
    return sum(1 for row in board for cell in row if cell.ball is not None)


def test_plain_move_converts_previews_and_schedules_new_ones(rng):
    board = board_from_rows(["R........", ".........", "..g.b.y.."])
    result = settle_move(board, (0, 0), (8, 8), NEXT, rng)
    assert result.lines == []
    assert result.score_delta == 0
    assert sorted(result.spawned) == [(2, 2), (4, 2), (6, 2)]
    assert result.board[8][8].ball == Ball(BallColor.RED)
    assert result.board[0][0].ball is None
    assert _ball_count(result.board) == 4
    assert len(result.previews) == 3
    assert sorted(result.previews) == sorted(incoming_positions(result.board))
    assert [result.board[y][x].incoming_ball.color for x, y in result.previews] == result.next_balls
    assert not result.game_over
    # The input board is never modified.
    assert board[0][0].ball == Ball(BallColor.RED)
    assert board[2][2].ball is None


def test_completing_a_line_clears_and_scores_without_spawning(rng):
    board = board_from_rows(["RRRR.....", "....R....", "........g"])
    result = settle_move(board, (4, 1), (4, 0), NEXT, rng)
    assert result.cleared == [(x, 0) for x in range(5)]
    assert result.score_delta == 5
    assert result.spawned == []
    assert _ball_count(result.board) == 0
    # Previews already on the board stay until the next plain move.
    assert incoming_positions(result.board) == [(8, 2)]
    assert len(result.next_balls) == 3
    assert not result.game_over


def test_spawned_balls_do_not_trigger_lines(rng):
    board = board_from_rows(["RRRRr", "K........"])
    result = settle_move(board, (0, 1), (8, 8), [BallColor.RED] * 3, rng)
    assert result.spawned == [(4, 0)]
    assert result.lines == []
    assert all(result.board[0][x].ball == Ball(BallColor.RED) for x in range(5))


def test_landing_on_a_preview_recalculates_away_from_old_cells(rng):
    board = board_from_rows(["gbyR"])
    previous = [(0, 0), (1, 0), (2, 0)]
    result = settle_move(board, (3, 0), (1, 0), NEXT, rng)
    assert result.preview_recalculated
    assert result.previous_previews == previous
    assert len(result.recalculated) == 3
    assert not set(result.recalculated) & set(previous)
    # No line, so the recalculated previews convert this turn.
    assert set(result.spawned) == set(result.recalculated)
    assert result.board[0][1].ball == Ball(BallColor.RED)
    assert result.board[0][1].incoming_ball is None


def test_landing_on_last_preview_of_nearly_full_board_ends_game(rng):
    board = patterned_board(empty=[(8, 8)])
    board[8][8].incoming_ball = Ball(BallColor.RED)
    result = settle_move(board, (7, 8), (8, 8), NEXT, rng)
    assert result.game_over
    assert is_board_full(result.board)
    assert incoming_positions(result.board) == []
    assert result.previews == []
    assert result.spawned == [(7, 8)]


def test_last_free_cell_gets_a_single_preview(rng):
    board = patterned_board(empty=[(0, 0), (2, 0), (4, 0), (8, 8)])
    for x in (0, 2, 4):
        board[0][x].incoming_ball = Ball(BallColor.CYAN)
    result = settle_move(board, (7, 8), (8, 8), NEXT, rng)
    assert sorted(result.spawned) == [(0, 0), (2, 0), (4, 0)]
    assert result.previews == [(7, 8)]
    assert count_empty_cells(result.board) == 1
    assert not result.game_over


def test_settle_without_a_ball_at_source_raises(rng):
    with pytest.raises(ValueError):
        settle_move(board_from_rows([]), (0, 0), (1, 0), NEXT, rng)


def test_new_game_board_places_balls_and_previews():
    board = new_game_board(random.Random(3), NEXT)
    assert _ball_count(board) == INITIAL_BALLS
    positions = incoming_positions(board)
    assert len(positions) == 3
    assert all(board[y][x].ball is None for x, y in positions)
    assert sorted(board[y][x].incoming_ball.color.name for x, y in positions) == sorted(c.name for c in NEXT)
