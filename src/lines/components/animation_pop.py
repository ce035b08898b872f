from dataclasses import dataclass
from typing import Tuple

from lines.components.board import BallColor

@dataclass(slots=True)
class PopAnimation:
    pos: Tuple[int, int]
    color: BallColor
    alpha: float = 1.0
