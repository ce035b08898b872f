import random

from esper import World

from lines.components.game_state import GameState
from lines.components.game_statistics import GameStatistics
from lines.components.hover_state import HoverState
from lines.systems.board_ops import create_empty_board


def create_world(*, rng: random.Random | None = None, seed: int | None = None) -> World:
    """Build the ECS world with the single game-state entity.

    The board starts empty; TurnEngine.start_new_game fills it. ``seed`` is a
    shortcut for ``rng=random.Random(seed)``.
    """
    world = World()
    if rng is None:
        rng = random.Random(seed)
    setattr(world, "random", rng)
    world.create_entity(
        GameState(board=create_empty_board()),
        GameStatistics(),
        HoverState(),
    )
    return world
