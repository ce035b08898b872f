from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class GameStatistics:
    """Per-game counters reported alongside a high score."""

    turns: int = 0
    lines_popped: int = 0
    longest_line: int = 0
    balls_cleared: int = 0
    line_lengths: List[int] = field(default_factory=list)

    def record_turn(self) -> None:
        self.turns += 1

    def record_lines(self, lengths: List[int], balls_cleared: int) -> None:
        if not lengths:
            return
        self.lines_popped += len(lengths)
        self.longest_line = max(self.longest_line, *lengths)
        self.balls_cleared += balls_cleared
        self.line_lengths.extend(lengths)

    def reset(self) -> None:
        self.turns = 0
        self.lines_popped = 0
        self.longest_line = 0
        self.balls_cleared = 0
        self.line_lengths = []

    def as_metadata(self) -> Dict[str, Any]:
        return {
            "turns": self.turns,
            "lines_popped": self.lines_popped,
            "longest_line": self.longest_line,
            "balls_cleared": self.balls_cleared,
            "line_lengths": list(self.line_lengths),
        }

    def summary(self, score: int, elapsed_seconds: int) -> Dict[str, Any]:
        """End-of-game figures; per-turn rates treat a game with no turns as one turn."""
        turns = max(self.turns, 1)
        return {
            "score": score,
            "elapsed_seconds": elapsed_seconds,
            "turns": self.turns,
            "lines_popped": self.lines_popped,
            "longest_line": self.longest_line,
            "balls_cleared": self.balls_cleared,
            "average_score_per_turn": score / turns,
            "lines_per_turn": self.lines_popped / turns,
        }
