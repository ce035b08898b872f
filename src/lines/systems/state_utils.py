from typing import Tuple

from esper import World

from lines.components.board import Board
from lines.components.game_state import GameSnapshot, GameState
from lines.components.game_statistics import GameStatistics
from lines.components.hover_state import HoverState
from lines.systems.board_ops import clone_board, create_empty_board


def get_or_create_game_state(world: World) -> Tuple[int, GameState]:
    """Return the game-state entity and its GameState, creating both if absent."""
    existing = list(world.get_component(GameState))
    if existing:
        return existing[0]
    entity = world.create_entity(
        GameState(board=create_empty_board()),
        GameStatistics(),
        HoverState(),
    )
    return entity, world.component_for_entity(entity, GameState)


def build_snapshot(state: GameState) -> GameSnapshot:
    board: Board = clone_board(state.board)
    return GameSnapshot(
        board=board,
        score=state.score,
        selected=state.selected,
        game_over=state.game_over,
        next_balls=tuple(state.next_balls),
        timer=state.timer,
        timer_active=state.timer_active,
    )
