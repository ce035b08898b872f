"""High-score collaborator.

The turn engine only talks to the ``HighScoreRecorder`` protocol; storage is
somebody else's concern. ``InMemoryHighScores`` is the default table used by
the window and the tests.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol

from lines.constants import HIGH_SCORE_CAPACITY


class HighScoreRecorder(Protocol):
    def is_new_high_score(self, score: int) -> bool: ...

    def record_high_score(self, score: int, elapsed_seconds: int, metadata: Mapping[str, Any]) -> bool: ...


@dataclass(slots=True)
class ScoreEntry:
    score: int
    elapsed_seconds: int
    metadata: Dict[str, Any] = field(default_factory=dict)
    recorded_at: float = 0.0


class InMemoryHighScores:
    """Top-N table kept sorted by score, best first."""

    def __init__(self, capacity: int = HIGH_SCORE_CAPACITY, entries: List[ScoreEntry] | None = None):
        self.capacity = capacity
        self._entries: List[ScoreEntry] = list(entries or [])
        self._sort_and_trim()

    @property
    def entries(self) -> List[ScoreEntry]:
        return list(self._entries)

    @property
    def best(self) -> int:
        return self._entries[0].score if self._entries else 0

    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def is_new_high_score(self, score: int) -> bool:
        return score > 0 and score > self.best

    def is_score_suitable(self, score: int) -> bool:
        """True if ``score`` would make it onto the table."""
        if score <= 0:
            return False
        if not self.is_full():
            return True
        return score > self._entries[-1].score

    def record_high_score(self, score: int, elapsed_seconds: int, metadata: Mapping[str, Any]) -> bool:
        if not self.is_score_suitable(score):
            return False
        game_id = metadata.get("game_id")
        if game_id is not None:
            # A running game improves its own entry instead of adding another.
            self._entries = [e for e in self._entries if e.metadata.get("game_id") != game_id]
        entry = ScoreEntry(
            score=score,
            elapsed_seconds=elapsed_seconds,
            metadata=dict(metadata),
            recorded_at=time.time(),
        )
        self._entries.append(entry)
        self._sort_and_trim()
        return any(e is entry for e in self._entries)

    def reset(self) -> None:
        self._entries.clear()

    def _sort_and_trim(self) -> None:
        # Stable sort keeps the earlier entry ahead on equal scores.
        self._entries.sort(key=lambda entry: entry.score, reverse=True)
        del self._entries[self.capacity:]
