"""Board model helpers.

Every function that changes a board returns a new board built with
``clone_board``; the board passed in is left untouched.
"""
from __future__ import annotations

from typing import Iterable, List

from lines.components.board import Ball, Board, Cell, Coordinate
from lines.constants import BOARD_SIZE


def create_empty_board(size: int = BOARD_SIZE) -> Board:
    return [[Cell(x=x, y=y) for x in range(size)] for y in range(size)]


def clone_board(board: Board) -> Board:
    return [[cell.copy() for cell in row] for row in board]


def in_bounds(board: Board, x: int, y: int) -> bool:
    return 0 <= y < len(board) and 0 <= x < len(board[y])


def get_cell(board: Board, x: int, y: int) -> Cell:
    if not in_bounds(board, x, y):
        raise ValueError(f"({x}, {y}) is outside the board")
    return board[y][x]


def is_board_full(board: Board) -> bool:
    return all(cell.ball is not None for row in board for cell in row)


def count_empty_cells(board: Board) -> int:
    return sum(1 for row in board for cell in row if cell.ball is None)


def empty_cells(board: Board) -> List[Coordinate]:
    """Empty coordinates in row-major order."""
    return [(cell.x, cell.y) for row in board for cell in row if cell.ball is None]


def incoming_positions(board: Board) -> List[Coordinate]:
    return [(cell.x, cell.y) for row in board for cell in row if cell.incoming_ball is not None]


def set_active(board: Board, coord: Coordinate | None) -> Board:
    """Return a copy where only ``coord`` (if any) is flagged active."""
    new_board = clone_board(board)
    for row in new_board:
        for cell in row:
            cell.active = coord is not None and (cell.x, cell.y) == coord
    return new_board


def clear_incoming(board: Board) -> Board:
    new_board = clone_board(board)
    for row in new_board:
        for cell in row:
            cell.incoming_ball = None
    return new_board


def move_ball(board: Board, source: Coordinate, target: Coordinate) -> Board:
    """Move the ball at ``source`` onto ``target``, dropping any preview there."""
    new_board = clone_board(board)
    src = get_cell(new_board, *source)
    dst = get_cell(new_board, *target)
    dst.ball = src.ball
    dst.incoming_ball = None
    src.ball = None
    for row in new_board:
        for cell in row:
            cell.active = False
    return new_board


def remove_balls(board: Board, positions: Iterable[Coordinate]) -> Board:
    new_board = clone_board(board)
    for x, y in positions:
        get_cell(new_board, x, y).ball = None
    return new_board


def ball_at(board: Board, x: int, y: int) -> Ball | None:
    if not in_bounds(board, x, y):
        return None
    return board[y][x].ball
