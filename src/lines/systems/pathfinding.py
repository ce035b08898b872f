from __future__ import annotations

from collections import deque
from typing import List, Optional, Set

from lines.components.board import Board, Coordinate
from lines.systems.board_ops import in_bounds

# N, E, S, W with y growing downwards.
NEIGHBOR_OFFSETS = ((0, -1), (1, 0), (0, 1), (-1, 0))


def find_path(board: Board, source: Coordinate, target: Coordinate) -> Optional[List[Coordinate]]:
    """Shortest orthogonal path from source to target through empty cells.

    The source cell itself is not required to be empty (it normally holds the
    ball being moved). Returns None when source == target or when the target
    cannot be reached; any returned path has at least two entries.
    """
    if source == target:
        return None
    sx, sy = source
    tx, ty = target
    if not in_bounds(board, sx, sy) or not in_bounds(board, tx, ty):
        return None
    if board[ty][tx].ball is not None:
        return None
    size_y = len(board)
    size_x = len(board[0])
    visited = [[False] * size_x for _ in range(size_y)]
    previous: List[List[Optional[Coordinate]]] = [[None] * size_x for _ in range(size_y)]
    visited[sy][sx] = True
    queue = deque([source])
    while queue:
        x, y = queue.popleft()
        if (x, y) == target:
            path = [target]
            cx, cy = target
            while (cx, cy) != source:
                prev = previous[cy][cx]
                assert prev is not None
                path.append(prev)
                cx, cy = prev
            path.reverse()
            return path
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < size_x and 0 <= ny < size_y):
                continue
            if visited[ny][nx] or board[ny][nx].ball is not None:
                continue
            visited[ny][nx] = True
            previous[ny][nx] = (x, y)
            queue.append((nx, ny))
    return None


def reachable_cells(board: Board, source: Coordinate) -> Set[Coordinate]:
    """Every empty cell a ball at ``source`` could move to."""
    sx, sy = source
    if not in_bounds(board, sx, sy):
        return set()
    seen: Set[Coordinate] = {source}
    queue = deque([source])
    while queue:
        x, y = queue.popleft()
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if (nx, ny) in seen or not in_bounds(board, nx, ny):
                continue
            if board[ny][nx].ball is not None:
                continue
            seen.add((nx, ny))
            queue.append((nx, ny))
    seen.discard(source)
    return seen
