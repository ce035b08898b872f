from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

Coordinate = Tuple[int, int]


class BallColor(Enum):
    """The seven ball colors. Values are the RGB used by the renderer."""
    RED = (200, 40, 40)
    GREEN = (60, 170, 70)
    BLUE = (50, 90, 210)
    YELLOW = (230, 200, 50)
    PURPLE = (150, 70, 180)
    CYAN = (60, 190, 200)
    BLACK = (30, 30, 30)

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.value


BALL_COLORS: List[BallColor] = list(BallColor)


@dataclass(frozen=True, slots=True)
class Ball:
    color: BallColor


@dataclass(slots=True)
class Cell:
    """One board square.

    ``incoming_ball`` marks where next turn's spawn lands; it never survives a
    turn boundary alongside a real ``ball``. ``active`` flags the selected source.
    """
    x: int
    y: int
    ball: Optional[Ball] = None
    incoming_ball: Optional[Ball] = None
    active: bool = False

    @property
    def is_empty(self) -> bool:
        return self.ball is None

    def copy(self) -> "Cell":
        return Cell(x=self.x, y=self.y, ball=self.ball, incoming_ball=self.incoming_ball, active=self.active)


# Indexed [y][x]. Treated as a snapshot: see board_ops.clone_board.
Board = List[List[Cell]]


def coord_key(coord: Coordinate) -> str:
    x, y = coord
    return f"{x},{y}"


def parse_coord_key(key: str) -> Coordinate:
    x_str, y_str = key.split(",")
    return int(x_str), int(y_str)
