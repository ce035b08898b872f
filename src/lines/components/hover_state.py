from dataclasses import dataclass
from typing import List, Optional

from lines.components.board import Coordinate


@dataclass(slots=True)
class HoverState:
    """Path preview for the cell under the pointer; never part of committed state."""
    cell: Optional[Coordinate] = None
    path_trail: Optional[List[Coordinate]] = None
    not_reachable: bool = False

    def clear(self) -> None:
        self.cell = None
        self.path_trail = None
        self.not_reachable = False
