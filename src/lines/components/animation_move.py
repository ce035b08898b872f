from dataclasses import dataclass
from typing import List

from lines.components.board import BallColor, Coordinate

@dataclass(slots=True)
class MoveAnimation:
    path: List[Coordinate]
    color: BallColor
    step: int = 0        # index into path of the cell currently occupied
    elapsed: float = 0.0  # time spent on the current step

    @property
    def position(self) -> Coordinate:
        return self.path[self.step]

    @property
    def finished(self) -> bool:
        return self.step >= len(self.path) - 1
