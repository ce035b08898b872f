"""Game state component owned by the turn engine."""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from lines.components.board import BallColor, Board, Coordinate


class GamePhase(Enum):
    """Turn engine states; only IDLE and SELECTED accept clicks."""
    IDLE = auto()
    SELECTED = auto()
    ANIMATING = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component with the committed game state.

    ``board`` is replaced wholesale on every transition and never edited in place.
    """
    board: Board
    score: int = 0
    selected: Optional[Coordinate] = None
    game_over: bool = False
    next_balls: List[BallColor] = field(default_factory=list)
    timer: int = 0
    timer_active: bool = False
    phase: GamePhase = GamePhase.IDLE
    # Source, target and path of the move being animated.
    pending_move: Optional[Tuple[Coordinate, Coordinate, List[Coordinate]]] = None


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of GameState handed to presentation code."""
    board: Board
    score: int
    selected: Optional[Coordinate]
    game_over: bool
    next_balls: Tuple[BallColor, ...]
    timer: int
    timer_active: bool
